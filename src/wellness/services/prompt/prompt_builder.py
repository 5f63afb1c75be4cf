"""
Prompt Builder

Constructs LLM prompts for the wellness companion from the user's
message, its sentiment and crisis verdicts, and recent conversation.

ARCHITECTURE: System prompts embed safety rules directly. Crisis
context switches the prompt to a resources-first instruction block.

CLINICAL_REVIEW_REQUIRED: System prompt wording should be reviewed
by mental health professionals.
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence

from wellness.config.logging_config import get_logger
from wellness.domain.enums import MessageSender
from wellness.domain.models import CrisisAnalysis, SentimentAnalysis

logger = get_logger(__name__)

CONTEXT_TURNS = 3


@dataclass
class BuiltPrompt:
    """
    Complete prompt ready for an LLM provider.

    Attributes:
        system_prompt: System/instruction prompt
        conversation_history: Recent turns as role/content dicts
        user_message: Current user message
        max_tokens: Suggested max tokens for response
        temperature: Suggested temperature setting
    """

    system_prompt: str
    conversation_history: list[dict] = field(default_factory=list)
    user_message: str = ""
    max_tokens: int = 500
    temperature: float = 0.7

    def to_messages(self) -> list[dict]:
        """
        Convert to OpenAI-style message format.

        Returns:
            List of message dictionaries
        """
        messages = [{"role": "system", "content": self.system_prompt}]
        messages.extend(self.conversation_history)
        if self.user_message:
            messages.append({"role": "user", "content": self.user_message})
        return messages


class PromptBuilder:
    """
    Builds companion prompts with safety constraints.

    Prompts are constructed from:
    1. The base companion persona and safety rules
    2. Sentiment context for the current message
    3. A crisis block when crisis language was detected
    4. The last few conversation turns
    """

    # CLINICAL_REVIEW_REQUIRED
    BASE_SYSTEM_PROMPT: str = """You are a compassionate AI mental wellness companion for young people aged 13-25.

SAFETY RULES (NON-NEGOTIABLE):
- NEVER provide medical diagnoses or name a condition the user "has"
- NEVER recommend medications or dosages
- NEVER claim to replace a therapist, doctor or counselor
- NEVER be dismissive of what the user shares
- ALWAYS validate feelings before offering suggestions
- ALWAYS encourage reaching out to trusted adults or professionals for serious concerns
- If the user mentions self-harm or suicide, share crisis resources right away

YOUR ROLE:
- Listen actively and reflect back what you hear
- Offer practical, evidence-based coping strategies (breathing, grounding, journaling)
- Support healthy routines: sleep, movement, connection
- Be warm, age-appropriate and non-judgmental

COMMUNICATION STYLE:
- Keep replies short (2-4 short paragraphs at most)
- Use clear, simple language
- Ask at most one gentle question per reply"""

    # CLINICAL_REVIEW_REQUIRED
    CRISIS_BLOCK: str = """CRISIS DETECTED (level: {level})
The user's message contains language associated with self-harm or suicide.
- Respond with care and take what they said seriously
- Clearly share: call or text 988 (Suicide & Crisis Lifeline), or text HOME to 741741 (Crisis Text Line)
- If they are in immediate danger, encourage calling 911 or going to the nearest emergency room
- Encourage them to reach out to a trusted adult right now
- Stay supportive and present; do not change the subject"""

    CRISIS_TEMPERATURE = 0.4
    DEFAULT_TEMPERATURE = 0.7
    DEFAULT_MAX_TOKENS = 500

    def build(
        self,
        user_message: str,
        sentiment: SentimentAnalysis,
        crisis: CrisisAnalysis,
        context_messages: Optional[Sequence] = None,
    ) -> BuiltPrompt:
        """
        Build a complete prompt for one user message.

        Args:
            user_message: Current user message
            sentiment: Sentiment analysis of the message
            crisis: Crisis analysis of the message
            context_messages: Earlier messages of the session (oldest first),
                anything with `sender` and `content` attributes

        Returns:
            BuiltPrompt ready for a provider
        """
        history = self._build_history(context_messages or [])
        system_prompt = self._build_system_prompt(sentiment, crisis)
        temperature = self.CRISIS_TEMPERATURE if crisis.detected else self.DEFAULT_TEMPERATURE

        prompt = BuiltPrompt(
            system_prompt=system_prompt,
            conversation_history=history,
            user_message=user_message,
            max_tokens=self.DEFAULT_MAX_TOKENS,
            temperature=temperature,
        )

        logger.debug(
            "Prompt built",
            crisis=crisis.detected,
            history_turns=len(history),
            temperature=temperature,
        )
        return prompt

    def _build_system_prompt(self, sentiment: SentimentAnalysis, crisis: CrisisAnalysis) -> str:
        parts = [self.BASE_SYSTEM_PROMPT]

        context_lines = [
            f"User's current emotional state: {sentiment.label.value} "
            f"(score: {sentiment.score:.2f})"
        ]
        if sentiment.indicators:
            words = ", ".join(f"{i.indicator_type}: {i.word}" for i in sentiment.indicators)
            context_lines.append(f"Detected indicators: {words}")
        parts.append("CURRENT CONTEXT:\n" + "\n".join(f"- {line}" for line in context_lines))

        if crisis.detected:
            parts.append(self.CRISIS_BLOCK.format(level=crisis.level.value.upper()))

        return "\n\n".join(parts)

    def _build_history(self, context_messages: Sequence) -> list[dict]:
        """Map the last few stored messages onto chat roles."""
        history = []
        for message in list(context_messages)[-CONTEXT_TURNS:]:
            if message.sender == MessageSender.SYSTEM.value:
                continue
            role = "user" if message.sender == MessageSender.USER.value else "assistant"
            history.append({"role": role, "content": message.content})
        return history
