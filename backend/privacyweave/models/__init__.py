from privacyweave.models.user import User
from privacyweave.models.inquiry import Inquiry
from privacyweave.models.job_application import JobApplication
from privacyweave.models.job_listing import JobListing
from privacyweave.models.chat import ChatConversation, ChatMessage

__all__ = ["User", "Inquiry", "JobApplication", "JobListing", "ChatConversation", "ChatMessage"]
