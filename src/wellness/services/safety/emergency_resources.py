"""
Emergency Resources

Crisis lines and immediate actions attached to every response in
which crisis language was detected.

LEGAL_REVIEW_REQUIRED: Phone numbers and URLs must be verified
periodically. Resources are US-focused.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class EmergencyResource:
    """
    A single emergency resource.

    Attributes:
        name: Resource name
        resource_type: hotline, text, website or emergency
        contact: Phone number, text instruction or URL
        description: Brief description
        available_24_7: Whether available around the clock
    """

    name: str
    resource_type: str
    contact: str
    description: str = ""
    available_24_7: bool = True

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "type": self.resource_type,
            "contact": self.contact,
            "description": self.description,
            "available_24_7": self.available_24_7,
        }


@dataclass(frozen=True)
class EmergencyResourceSet:
    """Everything returned to a client alongside a crisis verdict."""

    crisis_lines: tuple[EmergencyResource, ...]
    immediate_actions: tuple[str, ...]
    online_resources: tuple[EmergencyResource, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "crisis_lines": [r.to_dict() for r in self.crisis_lines],
            "immediate_actions": list(self.immediate_actions),
            "online_resources": [r.to_dict() for r in self.online_resources],
        }


DEFAULT_RESOURCES = EmergencyResourceSet(
    crisis_lines=(
        EmergencyResource(
            name="988 Suicide & Crisis Lifeline",
            resource_type="hotline",
            contact="988",
            description="Call or text 988 for free, confidential support",
        ),
        EmergencyResource(
            name="Crisis Text Line",
            resource_type="text",
            contact="Text HOME to 741741",
            description="Text with a trained crisis counselor",
        ),
        EmergencyResource(
            name="Emergency Services",
            resource_type="emergency",
            contact="911",
            description="If you are in immediate danger",
        ),
    ),
    immediate_actions=(
        "Call 911 if you are in immediate danger",
        "Go to your nearest emergency room",
        "Call or text 988 to talk to someone right now",
        "Reach out to a trusted adult, friend or family member",
        "Remove anything you could use to hurt yourself",
    ),
    online_resources=(
        EmergencyResource(
            name="National Institute of Mental Health",
            resource_type="website",
            contact="https://www.nimh.nih.gov/health/find-help",
        ),
        EmergencyResource(
            name="Mental Health America",
            resource_type="website",
            contact="https://www.mhanational.org/finding-help",
        ),
    ),
)


def get_emergency_resources() -> dict:
    """Emergency resources as a JSON-ready dictionary."""
    return DEFAULT_RESOURCES.to_dict()
