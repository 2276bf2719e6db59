"""Handler modules for CRD resources.

Handlers register themselves via @kopf decorators when
``efs_request_operator.handlers.efs_request`` is imported (see ``main``).
"""
