"""Service layer — operations consumed by the CLI.

INVARIANT: Service methods return ServiceResult. Errors raised by gitdown
itself become failed results; errors raised by third-party helpers propagate.
"""

from gitdown.services.render import RenderService
from gitdown.services.result import ServiceError, ServiceResult

__all__ = ["RenderService", "ServiceError", "ServiceResult"]
