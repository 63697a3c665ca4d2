import google.generativeai as genai
from typing import Dict
from config import settings

def get_gemini_client():
    """Initialize and return Gemini client."""
    if not settings.GEMINI_API_KEY:
        raise ValueError("GEMINI_API_KEY environment variable not set")

    genai.configure(api_key=settings.GEMINI_API_KEY)
    return genai.GenerativeModel(settings.GEMINI_MODEL)

def build_comparison_prompt(comparison: Dict) -> str:
    """Prompt asking for a short explanation of a two-university comparison."""
    first, second = comparison["universities"]
    advantages = comparison["advantages"]

    def describe(uni: Dict, position: str) -> str:
        rank = f"rank #{uni['ranking']}" if uni.get("ranking") else "unranked"
        if uni.get("establishedYear") is None:
            founded = "founding year unknown"
        else:
            founded = f"founded {uni['establishedYear']} ({uni['age']} years, {uni['ageCategory']})"
        return (
            f"- {uni['universityName']} ({uni.get('location', '')}, {uni.get('country', '')}): "
            f"{rank}, tuition ${uni['tuitionFee']:,.0f} ({uni['affordabilityTier']}), "
            f"{founded}, "
            f"value score {uni['valueScore']}. Advantages: {', '.join(advantages[position])}"
        )

    return f"""
You are a study-abroad advisor. Explain in 2-3 sentences how these two universities compare for a student.

Universities:
{describe(first, "first")}
{describe(second, "second")}

Cost difference: {comparison['costDifference']['statement']} (${comparison['costDifference']['amount']:,.0f} per year).

Only use the figures above. Do not invent rankings, fees or facts.
Return ONLY the explanation text, no JSON, no formatting.
"""

def generate_comparison_explanation(comparison: Dict) -> str:
    """
    Generate an AI explanation for a comparison.

    Args:
        comparison: Output of comparison.compare_universities

    Returns:
        AI-generated explanation, or the deterministic summary if generation fails
    """
    model = get_gemini_client()
    prompt = build_comparison_prompt(comparison)

    try:
        response = model.generate_content(prompt)
        return response.text.strip()
    except Exception:
        # Fallback message if AI fails
        return comparison["summary"]
