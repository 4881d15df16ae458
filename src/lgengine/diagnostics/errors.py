"""LG exception hierarchy with structured diagnostics.

All exceptions optionally store a Diagnostic for rich error information.

Hierarchy:
    LGError
    ├── LGSyntaxError                  (parse time, fails generator construction)
    │   ├── DuplicateTemplateError
    │   └── MalformedTemplateError
    ├── LGReferenceError               (generate time)
    │   ├── TemplateNotFoundError
    │   ├── ImportNotFoundError
    │   ├── NoGeneratorForLocaleError
    │   └── CircularTemplateReferenceError
    └── LGResolutionError              (generate time)
        ├── ExpressionError
        └── DepthLimitExceededError (lgengine.core.depth_guard)

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic

__all__ = [
    "CircularTemplateReferenceError",
    "DuplicateTemplateError",
    "ExpressionError",
    "ImportNotFoundError",
    "LGError",
    "LGReferenceError",
    "LGResolutionError",
    "LGSyntaxError",
    "MalformedTemplateError",
    "NoGeneratorForLocaleError",
    "TemplateNotFoundError",
]


class LGError(Exception):
    """Base exception for all LG errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize LGError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class LGSyntaxError(LGError):
    """Template resource could not be parsed.

    Raised when a resource is first parsed; the generator that owns the
    resource fails to construct.
    """


class DuplicateTemplateError(LGSyntaxError):
    """A template name is declared twice in one resource.

    Attributes:
        template_name: The redeclared name
        resource_id: Resource containing both declarations
    """

    def __init__(
        self, message: str | Diagnostic, *, template_name: str, resource_id: str
    ) -> None:
        super().__init__(message)
        self.template_name = template_name
        self.resource_id = resource_id


class MalformedTemplateError(LGSyntaxError):
    """Structurally invalid template resource.

    Examples:
    - Unterminated parameter list: # greet(name
    - Template header without body lines
    - Unterminated expression: - Hello ${name

    Attributes:
        resource_id: Resource being parsed
        line: 1-indexed line of the offending construct (0 if unknown)
    """

    def __init__(
        self, message: str | Diagnostic, *, resource_id: str = "", line: int = 0
    ) -> None:
        super().__init__(message)
        self.resource_id = resource_id
        self.line = line


class LGReferenceError(LGError):
    """A referenced template, import or generator could not be found."""


class TemplateNotFoundError(LGReferenceError):
    """Template absent from the resource and unreachable through its imports.

    Attributes:
        template_name: The name that was looked up
    """

    def __init__(self, message: str | Diagnostic, *, template_name: str) -> None:
        super().__init__(message)
        self.template_name = template_name


class ImportNotFoundError(LGReferenceError):
    """No resource along the fallback chain matches an import target.

    Attributes:
        target: Base name of the import target
        fallback_chain: Locales that were searched, in order
    """

    def __init__(
        self,
        message: str | Diagnostic,
        *,
        target: str,
        fallback_chain: tuple[str, ...] = (),
    ) -> None:
        super().__init__(message)
        self.target = target
        self.fallback_chain = fallback_chain


class NoGeneratorForLocaleError(LGReferenceError):
    """No generator is bound for any locale of the fallback chain.

    Attributes:
        locale: The requested locale
    """

    def __init__(self, message: str | Diagnostic, *, locale: str) -> None:
        super().__init__(message)
        self.locale = locale


class CircularTemplateReferenceError(LGReferenceError):
    """Template or import chain re-enters itself.

    Example:
        # a
        - ${b()}
        # b
        - ${a()}      <- a -> b -> a

    Attributes:
        cycle_path: Keys along the cycle, ending with the re-entered key
    """

    def __init__(self, message: str | Diagnostic, *, cycle_path: tuple[str, ...]) -> None:
        super().__init__(message)
        self.cycle_path = cycle_path


class LGResolutionError(LGError):
    """Runtime error while evaluating a template body."""


class ExpressionError(LGResolutionError):
    """Embedded expression failed to parse or evaluate.

    Examples:
    - Unbalanced parentheses in ${ (a + b }
    - Arithmetic on text: ${'a' * 2}
    - Division by zero

    Attributes:
        expression: Source of the failing expression
    """

    def __init__(self, message: str | Diagnostic, *, expression: str = "") -> None:
        super().__init__(message)
        self.expression = expression
