"""Draw every hex glyph, wait for a key, then show the key's glyph."""

from polychip8 import Chip8, EngineStatus
from polychip8.rendering import render_text


def assemble(*words):
    return b"".join(word.to_bytes(2, "big") for word in words)


PROGRAM = assemble(
    0x00E0,          # CLS
    0x6000,          # V0 = 0 (digit)
    0x6101,          # V1 = 1 (x)
    0x6201,          # V2 = 1 (y)
    0xF029,          # loop: I = glyph V0
    0xD125,          # draw at (V1, V2)
    0x7105,          # x += 5
    0x7001,          # digit += 1
    0x3010,          # skip if digit == 16
    0x1208,          # goto loop
    0xF30A,          # V3 = key
    0x00E0,
    0xF329,          # I = glyph V3
    0x6110,
    0x620A,
    0xD125,
    0x1220,          # halt
)


if __name__ == "__main__":
    machine = Chip8(seed=0, log_level="DEBUG")
    machine.load_rom(PROGRAM)

    for line in machine.disassemble(program_only=True):
        print(line)

    while machine.status != EngineStatus.AWAITING_KEY:
        machine.clock()
    print(render_text(machine.state.display))

    machine.set_keypress(0xC, True)
    for _ in range(10):
        machine.run_frame()
    print(render_text(machine.state.display))
