"""Constants for the EFS Request Operator."""

# API Group
API_GROUP = "gonzalez.com"
API_VERSION = "v1"
API_GROUP_VERSION = f"{API_GROUP}/{API_VERSION}"

# Resource Kinds
KIND_EFS_REQUEST = "EfsRequest"
PLURAL_EFS_REQUESTS = "efsrequests"
SHORTNAME_EFS_REQUEST = "efs"
CRD_NAME = f"{PLURAL_EFS_REQUESTS}.{API_GROUP}"

# Field Manager
FIELD_MANAGER = "efs-request-operator"
CONTROLLER_NAME = "efs-request-operator"

# Status document keys
STATUS_FILE_SYSTEM_ID = "file_system_id"
STATUS_CONDITION = "condition"
CONDITION_PHASE = "phase"
CONDITION_REASON = "reason"

# Provider tags
TAG_NAME = "Name"
TAG_OWNER = "Owner"

# Requeue delays (seconds)
DEFAULT_REQUEUE_AFTER_SECONDS = 20.0
DEFAULT_ERROR_REQUEUE_AFTER_SECONDS = 60.0

# Event Reasons
EVENT_REASON_RECONCILE_FAILED = "ReconcileFailed"
EVENT_REASON_FILE_SYSTEM_CREATING = "FileSystemCreating"
EVENT_REASON_CREATION_FAILED = "CreationFailed"
