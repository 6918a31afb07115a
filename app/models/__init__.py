from .counseling.counseling_category import CounselingCategory
from .counseling.counseling_session import CounselingSession
from .counseling.counseling_message import CounselingMessage
from .profile import Profile

__all__ = ["CounselingCategory", "CounselingSession", "CounselingMessage", "Profile"]
