"""
Keyword-driven replies for the site chat widget.

Rules are checked in order against the lowercased message and the first rule with a
matching keyword answers. Only the careers rule touches storage (live listings).
"""
from dataclasses import dataclass
from typing import Any, Callable

from privacyweave.schemas.chat import ChatConversationResponse
from privacyweave.schemas.job_application import JobApplicationCreate
from privacyweave.storage.base import Storage

INTERNSHIP_REPLY = (
    "We offer exciting internship opportunities for students and recent graduates! Our internship "
    "program provides hands-on experience in data privacy, AI development, and cybersecurity. "
    "Internships typically run for 3-6 months, with both summer and year-round opportunities available.\n\n"
    "Current internship openings include:\n"
    "- Privacy Engineering Intern\n"
    "- Data Science Intern\n"
    "- Marketing & Communications Intern\n\n"
    "Would you like to apply for an internship position? I can help you submit your application right away!"
)

NO_OPENINGS_REPLY = (
    "We're always looking for talented individuals to join our team! While we may not have specific "
    "positions listed right now, we'd be happy to consider your application. Would you like to submit "
    "your resume and information?"
)

COMPANY_REPLY = (
    "PrivacyWeave is a leading data privacy automation company. We specialize in AI-driven privacy "
    "solutions that help organizations protect user data, comply with regulations, and build trust. "
    "Our platform leverages advanced machine learning to automate privacy tasks, reduce compliance "
    "costs, and provide analytics for better decision-making."
)

SERVICES_REPLY = (
    "PrivacyWeave offers a comprehensive suite of data privacy solutions:\n\n"
    "1. Privacy Management: Automated data mapping, consent management, and privacy policy generation\n"
    "2. AI Privacy Framework: Privacy-preserving AI development tools and compliance checks\n"
    "3. Data Encryption: End-to-end encryption solutions for sensitive data\n"
    "4. Compliance Automation: Automated GDPR, CCPA, and other regulatory compliance\n"
    "5. Privacy Analytics: Insights and reporting on privacy practices\n\n"
    "Would you like more information about any specific service?"
)

APPLY_REPLY = (
    "I'd be happy to help you apply! Please provide the following information:\n\n"
    "1. Your full name\n"
    "2. Email address\n"
    "3. Phone number\n"
    "4. Position you're interested in\n"
    "5. Years of experience\n\n"
    "You can also upload your resume or CV, and I'll make sure it gets to our hiring team."
)

FALLBACK_REPLY = (
    "Thank you for reaching out to PrivacyWeave! I'm here to help with any questions about our "
    "company, services, or career opportunities. How can I assist you today?"
)


def _openings_reply(storage: Storage) -> str:
    listings = storage.get_active_job_listings()
    if not listings:
        return NO_OPENINGS_REPLY
    lines = ["We have several open positions at PrivacyWeave:", ""]
    lines += [f"{i}. {job.title} ({job.location})" for i, job in enumerate(listings, start=1)]
    lines += [
        "",
        "You can visit our careers page to apply, or I can help you submit an application right now. "
        "Would you like to apply for a position?",
    ]
    return "\n".join(lines)


ReplyBuilder = Callable[[Storage, ChatConversationResponse | None], str]


@dataclass(frozen=True)
class ReplyRule:
    name: str
    keywords: tuple[str, ...]
    build: ReplyBuilder

    def matches(self, text: str) -> bool:
        return any(keyword in text for keyword in self.keywords)


REPLY_RULES: tuple[ReplyRule, ...] = (
    ReplyRule("internship", ("internship", "intern", "student position", "summer job"),
              lambda storage, conversation: INTERNSHIP_REPLY),
    ReplyRule("careers", ("job", "career", "position", "work", "employment", "application"),
              lambda storage, conversation: _openings_reply(storage)),
    ReplyRule("company", ("company", "about", "privacyweave", "who are you"),
              lambda storage, conversation: COMPANY_REPLY),
    ReplyRule("services", ("service", "product", "offering", "solution", "what do you do"),
              lambda storage, conversation: SERVICES_REPLY),
    ReplyRule("apply", ("apply", "submit", "resume", "cv"),
              lambda storage, conversation: APPLY_REPLY),
)


def match_rule(text: str) -> ReplyRule | None:
    lowered = text.lower()
    return next((rule for rule in REPLY_RULES if rule.matches(lowered)), None)


def generate_bot_response(
    text: str, conversation: ChatConversationResponse | None, storage: Storage
) -> str:
    rule = match_rule(text)
    if rule is None:
        return FALLBACK_REPLY
    return rule.build(storage, conversation)


INTERNSHIP_METADATA_FIELDS = ("education", "university", "graduation_year", "availability_date")


def _metadata_value(metadata: dict[str, Any], field: str) -> Any:
    """Metadata comes from the browser in camelCase; accept snake_case too."""
    camel = field.split("_")[0] + "".join(part.title() for part in field.split("_")[1:])
    value = metadata.get(camel, metadata.get(field))
    if isinstance(value, str):
        value = value.strip()
    return value or None


def build_application_from_metadata(
    metadata: dict[str, Any], content: str, conversation: ChatConversationResponse
) -> JobApplicationCreate:
    """
    Turn chat metadata into a job application, falling back to what the conversation
    knows about the visitor and then to placeholders. Raises ValidationError when the
    supplied values are malformed (e.g. an invalid email).
    """
    fields = {
        "full_name": _metadata_value(metadata, "full_name") or conversation.user_name or "Unknown",
        "email": _metadata_value(metadata, "email") or conversation.user_email or "unknown@example.com",
        "phone": _metadata_value(metadata, "phone") or "Not provided",
        "position": _metadata_value(metadata, "position") or "Position via chatbot",
        "experience": _metadata_value(metadata, "experience") or "Not specified",
        "message": content,
    }
    if _metadata_value(metadata, "application_type") == "internship":
        fields["application_type"] = "internship"
        for field in INTERNSHIP_METADATA_FIELDS:
            fields[field] = _metadata_value(metadata, field)
    for key, value in fields.items():
        if value is not None and not isinstance(value, str):
            fields[key] = str(value)
    return JobApplicationCreate(**fields)

