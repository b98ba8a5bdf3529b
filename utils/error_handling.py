class ConfigError(Exception):
    """Configuration-related errors"""

class MalformedTemplateError(Exception):
    """Template is empty, missing or has an unusable shape"""

class TemplateNotFoundError(Exception):
    """Template id does not resolve to a stored template"""

class NormalizationError(Exception):
    """Resume data could not be read"""

class RenderError(Exception):
    """Rendering or export failed at the pipeline boundary"""

class GenerationError(Exception):
    """All configured text providers failed"""
