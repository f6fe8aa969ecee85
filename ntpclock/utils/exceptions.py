class NtpClockException(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return f"{self.__class__.__name__}: {self.message}"


class TransportError(NtpClockException):
    pass


class ProtocolError(NtpClockException):
    pass


class ConfigError(NtpClockException):
    pass


class CLIError(NtpClockException):
    pass
