"""
Error taxonomy for the math-to-HTML pipeline.

Only input validation and the rendering/rasterization/sanitization
collaborators can fail; normalization, segmentation and style resolution
are total functions.
"""


class MathSnapError(Exception):
    """Base exception for all pipeline errors"""
    pass


class InvalidInputError(MathSnapError):
    """Request text is not a string (client error)"""
    pass


class RenderError(MathSnapError):
    """A math segment could not be turned into an image"""
    pass


class RenderContainerMissingError(RenderError):
    """The rendering container was not found in the loaded page"""
    pass


class RenderSizingError(RenderError):
    """The rendering container has no usable size"""
    pass


class RasterizerError(RenderError):
    """Headless browser failed to start, load markup or take a screenshot"""
    pass


class RendererUnavailableError(RenderError):
    """The math-to-markup engine could not be executed"""
    pass


class RequestTooLargeError(MathSnapError):
    """Request body or text exceeds the configured size limit (client error)"""
    pass


class AssemblyError(MathSnapError):
    """A math segment reached the assembler without a rendered image"""
    pass


class SanitizerError(MathSnapError):
    """The allow-list sanitizer rejected or failed on the assembled HTML"""
    pass
