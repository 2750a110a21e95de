"""Exceptions raised by the CHIP-8 core."""


class Chip8Error(Exception):
    """Base class for all recoverable machine errors."""


class CapacityExceeded(Chip8Error):
    """ROM does not fit in program memory."""

    def __init__(self, size: int, capacity: int):
        super().__init__(f"ROM of {size} bytes exceeds program memory capacity of {capacity} bytes")
        self.size = size
        self.capacity = capacity


class StackOverflow(Chip8Error):
    """CALL issued with the stack already at maximum depth."""

    def __init__(self, pc: int, depth: int):
        super().__init__(f"Stack overflow at PC=0x{pc:04X} (depth {depth})")
        self.pc = pc
        self.depth = depth


class StackUnderflow(Chip8Error):
    """RET issued with an empty stack."""

    def __init__(self, pc: int):
        super().__init__(f"Stack underflow at PC=0x{pc:04X}")
        self.pc = pc


class InvalidArgument(Chip8Error, ValueError):
    """Caller supplied a value outside the accepted range."""


class AddressOutOfRange(Chip8Error, IndexError):
    """Memory access at or beyond the end of the address space."""

    def __init__(self, address: int, length: int = 1):
        super().__init__(f"Memory access of {length} byte(s) at 0x{address:04X} is out of range")
        self.address = address
        self.length = length
