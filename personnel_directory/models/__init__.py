from personnel_directory.models.audit_event import AuditEvent
from personnel_directory.models.directory_entry import DirectoryEntry
from personnel_directory.models.master_staff import MasterStaff

__all__ = [ "AuditEvent", "DirectoryEntry", "MasterStaff" ]
