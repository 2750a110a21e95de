"""Main CHIP-8 emulator execution engine."""

import numbers

import jax.numpy as jnp
from polychip8.state import EmulatorState, EngineStatus
from polychip8.decode import decode
from polychip8.dispatch import Op, get_op
from polychip8.constants import PROGRAM_START, MEMORY_SIZE, MAX_ROM_SIZE, NUM_KEYS
from polychip8.errors import AddressOutOfRange, CapacityExceeded, InvalidArgument
from polychip8.instructions.system import no_op, execute_clear_screen, execute_return
from polychip8.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from polychip8.instructions.alu import (
    execute_alu_set, execute_alu_or, execute_alu_and, execute_alu_xor, execute_alu_add,
    execute_alu_sub_xy, execute_alu_shift_right, execute_alu_sub_yx, execute_alu_shift_left
)
from polychip8.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from polychip8.instructions.display import execute_display
from polychip8.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)


HANDLERS = {
    Op.NOP: no_op,
    Op.CLS: execute_clear_screen,
    Op.RET: execute_return,
    Op.JP: execute_jump,
    Op.CALL: execute_call,
    Op.SE_VX_BYTE: execute_skip_if_equal_immediate,
    Op.SNE_VX_BYTE: execute_skip_if_not_equal_immediate,
    Op.SE_VX_VY: execute_skip_if_equal_register,
    Op.LD_VX_BYTE: execute_set,
    Op.ADD_VX_BYTE: execute_add,
    Op.LD_VX_VY: execute_alu_set,
    Op.OR: execute_alu_or,
    Op.AND: execute_alu_and,
    Op.XOR: execute_alu_xor,
    Op.ADD_VX_VY: execute_alu_add,
    Op.SUB: execute_alu_sub_xy,
    Op.SHR: execute_alu_shift_right,
    Op.SUBN: execute_alu_sub_yx,
    Op.SHL: execute_alu_shift_left,
    Op.SNE_VX_VY: execute_skip_if_not_equal_register,
    Op.LD_I: execute_set_index,
    Op.JP_V0: execute_jump_with_offset,
    Op.RND: execute_random,
    Op.DRW: execute_display,
    Op.SKP: execute_skip_if_key,
    Op.SKNP: execute_skip_if_not_key,
    Op.LD_VX_DT: execute_get_delay_timer,
    Op.LD_VX_K: execute_wait_for_key,
    Op.LD_DT_VX: execute_set_delay_timer,
    Op.LD_ST_VX: execute_set_sound_timer,
    Op.ADD_I_VX: execute_add_to_index,
    Op.LD_F_VX: execute_font_character,
    Op.LD_B_VX: execute_bcd_conversion,
    Op.LD_MEM_VX: execute_store_registers,
    Op.LD_VX_MEM: execute_load_registers,
}


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction."""
    decoded_instruction = decode(instruction)
    handler = HANDLERS[get_op(decoded_instruction.raw)]
    return handler(state, decoded_instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (jnp.astype(high, jnp.uint16) << 8) | jnp.astype(low, jnp.uint16)


def read_word(memory: jnp.ndarray, address: int) -> int:
    """Read the big-endian word at ``address``."""
    if address < 0 or address + 1 >= MEMORY_SIZE:
        raise AddressOutOfRange(address, 2)
    return int(_pack_u16(memory[address], memory[address + 1]))


def fetch(state: EmulatorState) -> tuple[EmulatorState, int]:
    """Fetch next instruction from memory.

    While awaiting a key the held instruction is returned again and the
    program counter does not move.
    """
    if state.status == EngineStatus.AWAITING_KEY:
        return state, int(state.instruction)

    pc = int(state.pc)
    instruction = read_word(state.memory, pc)
    return state.replace(
        pc=jnp.asarray(pc + 2, dtype=jnp.uint16),
        instruction=jnp.asarray(instruction, dtype=jnp.uint16)
    ), instruction


def clock(state: EmulatorState) -> EmulatorState:
    """Run one fetch/decode/dispatch/execute cycle."""
    state, instruction = fetch(state)
    return execute(state, instruction)


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement delay and sound timers once, flooring at zero."""
    return state.replace(
        delay_timer=jnp.astype(jnp.maximum(jnp.astype(state.delay_timer, jnp.int32) - 1, 0), jnp.uint8),
        sound_timer=jnp.astype(jnp.maximum(jnp.astype(state.sound_timer, jnp.int32) - 1, 0), jnp.uint8),
    )


def set_keypress(state: EmulatorState, key: int, pressed: bool) -> EmulatorState:
    """Update the state of one keypad key."""
    if isinstance(key, bool) or not isinstance(key, numbers.Integral) or not 0 <= key < NUM_KEYS:
        raise InvalidArgument(f"Key index must be an integer in 0..{NUM_KEYS - 1}, got {key!r}")
    return state.replace(keypad=state.keypad.at[key].set(bool(pressed)))


def load_rom(state: EmulatorState, rom_data: bytes) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    rom_data = bytes(rom_data)
    if len(rom_data) > MAX_ROM_SIZE:
        raise CapacityExceeded(len(rom_data), MAX_ROM_SIZE)
    rom_array = jnp.array(list(rom_data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom_data)].set(rom_array)
    return state.replace(memory=new_memory, rom_size=len(rom_data))


def load_rom_file(state: EmulatorState, filename: str) -> EmulatorState:
    """Load a ROM file from disk into CHIP-8 memory."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_rom(state, rom_data)
