"""
Fallback Responses

Canned supportive replies used when no LLM provider is configured
or every provider in the chain failed.

Selection order matters: crisis always wins, physical complaints
come next, then strong negative sentiment, then emotional topics,
then positive sentiment, then a general default.

CLINICAL_REVIEW_REQUIRED: Reply wording should be reviewed by
mental health professionals.
"""

from dataclasses import dataclass

from wellness.domain.enums import SentimentLabel
from wellness.domain.models import CrisisAnalysis, SentimentAnalysis

CRISIS_RESPONSE = (
    "I'm really concerned about what you've shared, and I'm glad you told me. "
    "You are not alone, and help is available right now:\n\n"
    "- Call or text 988 (Suicide & Crisis Lifeline)\n"
    "- Text HOME to 741741 (Crisis Text Line)\n"
    "- Call 911 if you are in immediate danger\n\n"
    "Your life matters, and there are people who want to help you through this. "
    "Please reach out to one of them now."
)

VERY_NEGATIVE_RESPONSE = (
    "It sounds like you're going through something really hard right now. "
    "Those feelings are valid, and it's okay to not be okay. "
    "Talking with a trusted friend, family member or counselor can really help. "
    "If things feel like too much, you can call or text 988 any time."
)

POSITIVE_RESPONSE = (
    "It's really good to hear something positive from you! "
    "Thanks for sharing that with me. "
    "Is there anything you'd like to talk about today, or are you just checking in?"
)

DEFAULT_RESPONSE = (
    "I'm here to listen, and I'm glad you reached out. That takes courage. "
    "Could you tell me a bit more about what's going on for you today? "
    "If you're in crisis or need help right away, please contact 988 "
    "or your local emergency services."
)


@dataclass(frozen=True)
class TopicResponse:
    """A canned reply chosen when any of its phrases appears in the message."""

    topic: str
    phrases: tuple[str, ...]
    response: str

    def matches(self, lowered_message: str) -> bool:
        return any(phrase in lowered_message for phrase in self.phrases)


PHYSICAL_TOPICS: tuple[TopicResponse, ...] = (
    TopicResponse(
        topic="headache",
        phrases=("headache", "head hurts", "migraine"),
        response=(
            "I'm sorry you're dealing with a headache. Physical pain can wear down "
            "your whole day and your mood. Headaches are sometimes linked to stress, "
            "dehydration or poor sleep. I can't give medical advice, but drinking some "
            "water and resting somewhere quiet might bring a little comfort. "
            "Have you been under more pressure than usual lately?"
        ),
    ),
    TopicResponse(
        topic="tired",
        phrases=("tired", "exhausted", "fatigue"),
        response=(
            "Being exhausted makes everything harder to handle. Sometimes our bodies "
            "are asking for rest, and sometimes tiredness comes from stress or how "
            "we're feeling inside. Have you been able to sleep well, or is something "
            "keeping you from feeling rested?"
        ),
    ),
    TopicResponse(
        topic="sick",
        phrases=("sick", "not feeling well", "unwell"),
        response=(
            "I'm sorry you're not feeling well. Being unwell can affect your mood too. "
            "Are you feeling sick physically, emotionally, or maybe both? "
            "I hope you can take some time to rest and look after yourself."
        ),
    ),
)

EMOTIONAL_TOPICS: tuple[TopicResponse, ...] = (
    TopicResponse(
        topic="depressed",
        phrases=("depressed", "depression", "sad"),
        response=(
            "Thank you for telling me you're feeling down. That heaviness is real, "
            "and what you're going through matters. Can you tell me more about what's "
            "been weighing on you? If these feelings keep going or get worse, a mental "
            "health professional can offer real support."
        ),
    ),
    TopicResponse(
        topic="stress",
        phrases=("stress", "overwhelmed"),
        response=(
            "It sounds like there's a lot on your plate, and feeling overwhelmed makes "
            "sense. Stress can even show up in the body as headaches or tiredness. "
            "What feels like the biggest challenge right now? Breaking it into smaller "
            "pieces can make it feel more manageable."
        ),
    ),
    TopicResponse(
        topic="lonely",
        phrases=("lonely", "alone"),
        response=(
            "Loneliness can really hurt, and I appreciate you sharing it with me. "
            "Even when it feels like no one is there, there are people who care. "
            "What's been making you feel most alone lately?"
        ),
    ),
)

ANXIETY_RESPONSE = TopicResponse(
    topic="anxious",
    phrases=("anxious", "anxiety"),
    response=(
        "I hear that you're feeling anxious, and that can be really overwhelming. "
        "One thing that helps some people is 4-7-8 breathing: in for 4 counts, hold "
        "for 7, out for 8. Grounding can help too: notice 5 things you can see, 4 you "
        "can touch and 3 you can hear. What's been making you feel most anxious?"
    ),
)


def select_fallback_response(
    message: str,
    crisis: CrisisAnalysis,
    sentiment: SentimentAnalysis,
) -> str:
    """
    Pick the canned reply for a message.

    Args:
        message: Raw user message
        crisis: Crisis verdict for the message
        sentiment: Sentiment verdict for the message

    Returns:
        Reply text
    """
    if crisis.detected:
        return CRISIS_RESPONSE

    lowered = message.lower()

    for topic in PHYSICAL_TOPICS:
        if topic.matches(lowered):
            return topic.response

    if sentiment.label == SentimentLabel.VERY_NEGATIVE:
        return VERY_NEGATIVE_RESPONSE

    if ANXIETY_RESPONSE.matches(lowered) or sentiment.has_anxiety_indicators:
        return ANXIETY_RESPONSE.response

    for topic in EMOTIONAL_TOPICS:
        if topic.matches(lowered):
            return topic.response

    if sentiment.label.is_positive:
        return POSITIVE_RESPONSE

    return DEFAULT_RESPONSE
