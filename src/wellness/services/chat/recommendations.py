"""
Recommendations

Coping suggestions attached to every chat reply, chosen from the
crisis and sentiment verdicts of the user's message.
"""

from wellness.domain.models import CrisisAnalysis, SentimentAnalysis


def build_recommendations(
    sentiment: SentimentAnalysis,
    crisis: CrisisAnalysis,
) -> list[dict]:
    """
    Recommendations for one message, highest priority first.

    Returns:
        List of recommendation dictionaries (possibly empty)
    """
    recommendations: list[dict] = []

    if crisis.detected:
        recommendations.append({
            "type": "immediate_action",
            "priority": "high",
            "message": "Please reach out to a crisis counselor or someone you trust right now.",
            "resources": [
                "988 Suicide & Crisis Lifeline",
                "Crisis Text Line: Text HOME to 741741",
            ],
        })

    if sentiment.label.is_negative:
        recommendations.append({
            "type": "mood_support",
            "priority": "medium",
            "message": "It sounds like things are hard right now. These might help:",
            "suggestions": [
                "Slow, deep breathing for a few minutes",
                "Talking to a trusted friend or family member",
                "Doing something small you usually enjoy",
                "Professional counseling if the feelings stick around",
            ],
        })

    if sentiment.has_anxiety_indicators:
        recommendations.append({
            "type": "anxiety_management",
            "priority": "medium",
            "message": "Some techniques that can ease anxiety:",
            "suggestions": [
                "4-7-8 breathing",
                "5-4-3-2-1 grounding",
                "Progressive muscle relaxation",
                "A regular sleep and exercise routine",
            ],
        })

    if sentiment.label.is_positive:
        recommendations.append({
            "type": "positive_reinforcement",
            "priority": "low",
            "message": "Great to hear you're feeling good! Ways to keep it going:",
            "suggestions": [
                "Keep doing the things that bring you joy",
                "Note a few things you're grateful for",
                "Stay connected with people who support you",
            ],
        })

    return recommendations
