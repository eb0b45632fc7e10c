"""Exception types shared by the patcher"""


class ConfigurationError(ValueError):
    """Run-level misconfiguration; aborts the whole run"""


class FormatResolutionError(ConfigurationError):
    """Output format has no alpha-capable counterpart"""


class TextureProcessingError(RuntimeError):
    """A texture could not be decoded, analyzed or recompressed"""


class TextureDecodeError(TextureProcessingError):
    pass


class CompressorError(TextureProcessingError):
    pass


class Kn5FormatError(TextureProcessingError):
    pass


class TextureNotFoundError(KeyError):
    """Texture name is not present in the car's KN5"""

    def __str__(self):
        return str(self.args[0]) if self.args else ''


class CarSkippedError(FileNotFoundError):
    """Car data is incomplete; the car is skipped, the run continues"""


class MissingKn5Error(CarSkippedError):
    pass


class MissingSkinsError(CarSkippedError):
    pass
