"""Action Layer - Semantic form-field operations."""

from formguard.layers.action.form_controller import FormFieldController

__all__ = ["FormFieldController"]
