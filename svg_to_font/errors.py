from __future__ import annotations


class SvgToFontError(Exception):
    """Base class for every error reported to the user by the CLI."""


class UsageError(SvgToFontError):
    pass


class PrerequisiteError(SvgToFontError):
    pass


class InputError(SvgToFontError):
    pass


class InputNotFoundError(InputError):
    def __init__(self, path) -> None:
        super().__init__(f"Input directory does not exist: {path}")
        self.path = path


class EmptyInputError(InputError):
    def __init__(self, path) -> None:
        super().__init__(f"No usable SVG files found in {path}")
        self.path = path


class ToolExecutionError(SvgToFontError):
    pass


class CommandFailedError(ToolExecutionError):
    def __init__(self, command: str, exit_code: int, detail: str = "") -> None:
        super().__init__(f'Command "{command}" failed with exit code {exit_code}')
        self.command = command
        self.exit_code = exit_code
        self.detail = detail


class CommandNotFoundError(ToolExecutionError):
    def __init__(self, command: str, reason: str) -> None:
        super().__init__(f'Command "{command}" could not be started: {reason}')
        self.command = command


class CommandTimeoutError(ToolExecutionError):
    def __init__(self, command: str, timeout: float) -> None:
        super().__init__(f'Command "{command}" did not finish within {timeout:g} seconds')
        self.command = command
        self.timeout = timeout


class DeliveryError(SvgToFontError):
    pass


class DartFormatError(SvgToFontError):
    pass
