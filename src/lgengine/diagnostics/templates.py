"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from collections.abc import Iterable, Sequence

from .codes import Diagnostic, DiagnosticCode, SourceSpan

__all__ = ["ErrorTemplate"]


def _describe_chain(chain: Sequence[str]) -> str:
    return ", ".join(repr(locale) for locale in chain) or "<empty>"


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    Each method returns a Diagnostic that the caller wraps in the matching
    exception class.
    """

    @staticmethod
    def template_not_found(
        template_name: str, resource_id: str | None = None
    ) -> Diagnostic:
        """Template absent locally and through imports.

        Args:
            template_name: The name that was looked up
            resource_id: Resource the lookup started from (None for inline use)

        Returns:
            Diagnostic for TEMPLATE_NOT_FOUND
        """
        where = f" in '{resource_id}' or its imports" if resource_id else ""
        return Diagnostic(
            code=DiagnosticCode.TEMPLATE_NOT_FOUND,
            message=f"Template '{template_name}' not found{where}",
            hint="Define the template or import a resource that defines it",
        )

    @staticmethod
    def import_not_found(
        target: str, fallback_chain: Sequence[str], source_id: str | None = None
    ) -> Diagnostic:
        """Import target has no resource along the fallback chain.

        Args:
            target: Import target base name
            fallback_chain: Locales searched, in order
            source_id: Resource declaring the import

        Returns:
            Diagnostic for IMPORT_NOT_FOUND
        """
        origin = f" (imported by '{source_id}')" if source_id else ""
        return Diagnostic(
            code=DiagnosticCode.IMPORT_NOT_FOUND,
            message=(
                f"Import '{target}'{origin} not found for locales "
                f"{_describe_chain(fallback_chain)}"
            ),
            hint=f"Add '{target}.lg' or a locale-specific variant of it",
        )

    @staticmethod
    def no_generator_for_locale(locale: str, available: Iterable[str]) -> Diagnostic:
        """No generator bound along the fallback chain.

        Args:
            locale: Requested locale
            available: Locales that do have generators

        Returns:
            Diagnostic for NO_GENERATOR_FOR_LOCALE
        """
        return Diagnostic(
            code=DiagnosticCode.NO_GENERATOR_FOR_LOCALE,
            message=(
                f"No generator for locale '{locale}' "
                f"(available: {_describe_chain(sorted(available))})"
            ),
            hint="Bind a generator for the neutral locale '' as the final fallback",
            locale=locale,
        )

    @staticmethod
    def circular_reference(cycle_path: Sequence[str]) -> Diagnostic:
        """Template or import chain re-enters itself.

        Args:
            cycle_path: Keys along the cycle, ending with the re-entered key

        Returns:
            Diagnostic for CIRCULAR_REFERENCE
        """
        return Diagnostic(
            code=DiagnosticCode.CIRCULAR_REFERENCE,
            message=f"Circular template reference: {' -> '.join(cycle_path)}",
            hint="Break the cycle; templates cannot invoke themselves indirectly",
            resolution_path=tuple(cycle_path),
        )

    @staticmethod
    def duplicate_template(template_name: str, resource_id: str, line: int) -> Diagnostic:
        """Template declared twice in one resource.

        Args:
            template_name: Redeclared name
            resource_id: Resource being parsed
            line: Line of the second declaration

        Returns:
            Diagnostic for DUPLICATE_TEMPLATE
        """
        return Diagnostic(
            code=DiagnosticCode.DUPLICATE_TEMPLATE,
            message=f"Template '{template_name}' is declared more than once",
            span=SourceSpan(resource_id, line),
            hint="Rename one of the templates or move it to a locale-specific resource",
        )

    @staticmethod
    def malformed_template(reason: str, resource_id: str, line: int) -> Diagnostic:
        """Structurally invalid template resource.

        Args:
            reason: What is wrong
            resource_id: Resource being parsed
            line: 1-indexed line (values below 1 are reported as line 1)

        Returns:
            Diagnostic for MALFORMED_TEMPLATE
        """
        return Diagnostic(
            code=DiagnosticCode.MALFORMED_TEMPLATE,
            message=reason,
            span=SourceSpan(resource_id, max(line, 1)),
        )

    @staticmethod
    def source_too_large(resource_id: str, size: int, limit: int) -> Diagnostic:
        """Resource content exceeds the configured size limit."""
        return Diagnostic(
            code=DiagnosticCode.SOURCE_TOO_LARGE,
            message=f"Resource '{resource_id}' is {size} characters; limit is {limit}",
            hint="Split the resource or raise max_source_size",
        )

    @staticmethod
    def expression_syntax(expression: str, reason: str, position: int) -> Diagnostic:
        """Expression could not be parsed.

        Args:
            expression: Expression source
            reason: What the parser expected
            position: 0-indexed character offset

        Returns:
            Diagnostic for EXPRESSION_SYNTAX
        """
        return Diagnostic(
            code=DiagnosticCode.EXPRESSION_SYNTAX,
            message=f"Invalid expression '{expression}' at offset {position}: {reason}",
        )

    @staticmethod
    def expression_type_mismatch(operator: str, left: object, right: object) -> Diagnostic:
        """Operator applied to unsupported operand types."""
        return Diagnostic(
            code=DiagnosticCode.EXPRESSION_TYPE_MISMATCH,
            message=(
                f"Operator '{operator}' not supported between "
                f"{type(left).__name__} and {type(right).__name__}"
            ),
        )

    @staticmethod
    def division_by_zero(expression: str) -> Diagnostic:
        """Division or modulo by zero."""
        return Diagnostic(
            code=DiagnosticCode.EXPRESSION_TYPE_MISMATCH,
            message=f"Division by zero in '{expression}'",
        )

    @staticmethod
    def function_failed(function_name: str, reason: str) -> Diagnostic:
        """Built-in function raised."""
        return Diagnostic(
            code=DiagnosticCode.FUNCTION_FAILED,
            message=f"Function '{function_name}' failed: {reason}",
        )

    @staticmethod
    def depth_exceeded(max_depth: int) -> Diagnostic:
        """Template nesting exceeded the depth limit."""
        return Diagnostic(
            code=DiagnosticCode.MAX_DEPTH_EXCEEDED,
            message=f"Maximum template nesting depth ({max_depth}) exceeded",
            hint="Reduce nesting or raise max_depth in GeneratorConfig",
        )
