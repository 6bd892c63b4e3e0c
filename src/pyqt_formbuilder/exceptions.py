"""Form builder exceptions."""


class FormBuilderError(Exception):
    """Base class for all pyqt-formbuilder errors."""


class DuplicateFieldNameError(FormBuilderError):
    """Raised in strict mode when a second field registers under a taken name."""

    def __init__(self, name: str):
        super().__init__(f"Field name '{name}' is already registered in this form")
        self.name = name


class FieldNotRegisteredError(FormBuilderError, KeyError):
    """Raised when a form operation targets a name with no registered field."""

    def __init__(self, name: str):
        super().__init__(f"No field registered under '{name}'")
        self.name = name

    def __str__(self) -> str:
        return self.args[0]


class FocusHandleDisposedError(FormBuilderError, RuntimeError):
    """Raised when a disposed FocusHandle is used."""
