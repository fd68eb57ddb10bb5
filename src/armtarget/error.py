from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import List, Optional


class ArmTargetError(Exception):
    """Exception raised by functions defined in armtarget."""

    def __init__(
        self, message: str | List[str] | None = None, origin: Optional[str] = None
    ):
        """Initialize an ArmTargetError.

        ArmTargetError can store several messages and thus be used to
        propagate them.

        :param message: the exception message
        :param origin: the name of the function, class, or module having raised
            the exception
        """
        super().__init__(message, origin)
        self.origin = origin
        self.messages = []
        if message is not None:
            if isinstance(message, str):
                self.messages.append(message)
            else:
                self.messages.extend(message)

    def __iadd__(self, other: str | List[str] | ArmTargetError) -> ArmTargetError:
        """Add messages to the current instance.

        :param other: a message or an ArmTargetError instance
        """
        if isinstance(other, ArmTargetError):
            self.messages.extend(other.messages)
        elif isinstance(other, str):
            self.messages.append(other)
        else:
            self.messages.extend(other)
        return self

    def __str__(self) -> str:
        if self.messages:
            error_msg = self.messages[-1]
        else:
            error_msg = self.__class__.__name__
        if self.origin:
            return f"{self.origin}: {error_msg}"
        else:
            return error_msg


class FlagTranslationError(ArmTargetError):
    """Malformed or incomplete GCC flag values."""

    pass


class MissingCpu(FlagTranslationError):
    def __init__(self) -> None:
        super().__init__("--mcpu argument required")


class InvalidCpu(FlagTranslationError):
    def __init__(self, value: str):
        super().__init__(
            f"--mcpu={value} is not a valid CPU, see info command for valid CPUs"
        )
        self.value = value


class InvalidFloatAbi(FlagTranslationError):
    def __init__(self, value: str):
        super().__init__(
            f"--mfloat-abi={value} is not a valid float abi, valid options"
            ' are "hard", "softfp", and "soft"'
        )
        self.value = value


class InvalidFpu(FlagTranslationError):
    def __init__(self, value: str):
        super().__init__(
            f"--mfpu={value} is not a valid FPU, see info command for valid FPUs"
        )
        self.value = value


class MissingFpu(FlagTranslationError):
    def __init__(self) -> None:
        super().__init__("--mfpu is required if --mfloat-abi!=soft")


class ConversionError(ArmTargetError):
    """A target descriptor violates the domain rules or cannot be mapped."""

    pass


class UnsupportedCpu(ConversionError):
    """The resolved architecture has no counterpart in the catalogue."""

    pass


class FpuSpecifiedForSoftFloatAbi(ConversionError):
    """An FPU is set while the float ABI is soft."""

    pass


class FpuRequiredForFloatAbi(ConversionError):
    """No FPU is set while the float ABI is hard or softfp."""

    pass


class IncompatibleFpuForCpu(ConversionError):
    """The FPU is not one of the FPUs the CPU can be paired with."""

    pass


class NoFpuOnCpu(ConversionError):
    """An FPU is set on a CPU that has no FPU at all."""

    pass


class FeatureOverflow(ConversionError):
    """Too many feature flags requested."""

    pass


class NotFreestanding(ConversionError):
    """The resolved architecture does not target a freestanding OS."""

    pass
