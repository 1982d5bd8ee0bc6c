"""
Templates mapping fragments to named, typed and editable slots.
"""

from .css_template import CssRuleTemplate
from .json_template import JsonObjectTemplate
from .regex_template import RegexPatternTemplate
from .template import SlotInsertionError, SlotSpecification, Template, TemplateSettings, TemplateSlot
from .valuators import JsonValuator, NumericValuator, TextualValuator, Valuator, ValuatorProvider

__all__ = [
    "CssRuleTemplate",
    "JsonObjectTemplate",
    "RegexPatternTemplate",
    "SlotInsertionError",
    "SlotSpecification",
    "Template",
    "TemplateSettings",
    "TemplateSlot",
    "JsonValuator",
    "NumericValuator",
    "TextualValuator",
    "Valuator",
    "ValuatorProvider",
]
