class FactoryError(Exception):
    pass


class UndefinedFactory(FactoryError):
    """Raised when building a factory name that was never registered."""

    def __init__(self, factory_name: str) -> None:
        self.factory_name = factory_name
        super().__init__(f"No factory defined for {factory_name!r}")


class UndefinedSave(FactoryError):
    def __init__(self) -> None:
        super().__init__("No persistence configured. Pass `persistence=` to Factories to use create().")


class InvalidDeferredAttribute(FactoryError, TypeError):
    """Raised when a deferred attribute is constructed with a bad weight or compute function."""


class UnknownOverrideField(FactoryError):
    def __init__(self, field_name: str, record_type: type) -> None:
        self.field_name = field_name
        self.record_type = record_type
        super().__init__(f"{record_type.__name__} has no field {field_name!r}")


class DeferredResolutionError(FactoryError):
    """Raised when deferred attributes keep producing new deferred attributes."""

    def __init__(self, field_names: list[str], passes: int) -> None:
        self.field_names = field_names
        self.passes = passes
        super().__init__(f"Deferred attributes {', '.join(field_names)} still pending after {passes} passes.")
