from __future__ import annotations


class WorkOrderError(RuntimeError):
    pass


class MalformedInputError(WorkOrderError, ValueError):
    pass


class WorkOrderNotFoundError(WorkOrderError):
    pass


class UpstreamFetchError(WorkOrderError):
    pass


class TemplateError(WorkOrderError):
    pass


class SerializationError(WorkOrderError):
    pass


class PermissionDeniedError(WorkOrderError):
    pass


class ConflictError(WorkOrderError):
    pass
