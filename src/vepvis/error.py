class ConfigurationError(Exception):
    """
    raised when the inputs or options given cannot be used to build the requested object
    """

    pass


class InputNotFoundError(ConfigurationError, FileNotFoundError):
    """
    raised when an input path expression does not match any files
    """

    pass


class UnsupportedVersionError(ConfigurationError):
    """
    raised when the VEP version cannot be determined or is not one of the supported versions
    """

    pass


class HierarchyFormatError(ConfigurationError):
    """
    raised when a user supplied mutation hierarchy does not have the expected columns
    """

    pass


class MissingReferenceError(ConfigurationError):
    """
    raised when a reference sequence is required for a function but has not been given
    """

    pass
