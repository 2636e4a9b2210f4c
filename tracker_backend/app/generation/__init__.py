from .defaults import get_generic_config
from .generic import is_generic_config, locations_look_generic, triggers_look_generic
from .parsing import GenericRejected, InvalidOutput, ShapeA, ShapeB, parse_generation_output
from .prompts import GenerationInput, build_generation_prompt, confidence_floor
from .service import ConfigGenerationService, GenerationOutcome

__all__ = [
    "get_generic_config",
    "is_generic_config",
    "locations_look_generic",
    "triggers_look_generic",
    "GenericRejected",
    "InvalidOutput",
    "ShapeA",
    "ShapeB",
    "parse_generation_output",
    "GenerationInput",
    "build_generation_prompt",
    "confidence_floor",
    "ConfigGenerationService",
    "GenerationOutcome",
]
