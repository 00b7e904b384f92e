# =============================================================================
# contacts_core/services/__init__.py
# Service Layer for the Contact Parsing Dashboard
# =============================================================================
"""
Business operations kept out of the Streamlit pages.

Usage Example:
-------------
    from contacts_core.services import ContactsService, RecordEdit

    service = ContactsService(repository, cache, notifier)
    result = asyncio.run(service.delete_record(42))
    if result.success:
        st.toast("Deleted")
"""

from .base_service import BaseService, ServiceResult
from .contacts_service import (
    ContactsService,
    RecordEdit,
    ParsingParams,
    PipelineOrchestrator,
)

__all__ = [
    "BaseService",
    "ServiceResult",
    "ContactsService",
    "RecordEdit",
    "ParsingParams",
    "PipelineOrchestrator",
]
