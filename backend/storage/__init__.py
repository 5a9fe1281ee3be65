from .local import LocalAttachmentStore
from .staging import StagedUpload, stage_upload

__all__ = ["LocalAttachmentStore", "StagedUpload", "stage_upload"]
