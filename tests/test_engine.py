"""Tests for the fetch/decode/execute engine."""

import zlib

import jax.numpy as jnp
import numpy as np
import pytest
from polychip8 import (
    fetch, clock, tick_timers, set_keypress, load_rom, load_rom_file, decode, execute,
    EngineStatus, CapacityExceeded, InvalidArgument, AddressOutOfRange, StackUnderflow, PROGRAM_START,
)
from polychip8.constants import MAX_ROM_SIZE
from conftest import rom


def checksum(state):
    return zlib.crc32(np.asarray(state.memory).tobytes())


class TestLoadRom:
    """Test loading program bytes."""

    def test_load_rom_places_bytes(self, fresh_state):
        state = load_rom(fresh_state, b"\x12\x34\x56")
        assert [int(b) for b in state.memory[0x200:0x203]] == [0x12, 0x34, 0x56]
        assert state.rom_size == 3

    def test_load_rom_keeps_registers(self, fresh_state):
        """Loading does not reset registers."""
        state = execute(fresh_state, 0x6A42)
        state = load_rom(state, b"\x00\xE0")
        assert state.V[0xA] == 0x42

    def test_load_rom_exact_capacity(self, fresh_state):
        state = load_rom(fresh_state, bytes([0xAB]) * MAX_ROM_SIZE)
        assert state.memory[0xFFF] == 0xAB

    def test_load_rom_too_large(self, fresh_state):
        """Oversized ROM fails and memory is unchanged."""
        state = load_rom(fresh_state, b"\x12\x34")
        before = checksum(state)

        with pytest.raises(CapacityExceeded):
            load_rom(state, bytes(MAX_ROM_SIZE + 1))

        assert checksum(state) == before

    def test_load_rom_file(self, fresh_state, tmp_path):
        path = tmp_path / "test.ch8"
        path.write_bytes(rom(0x00E0, 0x1200))
        state = load_rom_file(fresh_state, str(path))
        assert state.rom_size == 4
        assert state.memory[0x200] == 0x00
        assert state.memory[0x201] == 0xE0


class TestFetch:
    """Test fetch and decode."""

    def test_fetch_big_endian(self, fresh_state):
        state = load_rom(fresh_state, rom(0xD12F))
        state, instruction = fetch(state)

        assert instruction == 0xD12F
        assert state.pc == PROGRAM_START + 2
        assert state.instruction == 0xD12F

    def test_decode_fields(self):
        decoded = decode(0xD12F)
        assert decoded.opcode == 0xD
        assert decoded.x == 0x1
        assert decoded.y == 0x2
        assert decoded.n == 0xF
        assert decoded.nn == 0x2F
        assert decoded.nnn == 0x12F

    def test_fetch_at_end_of_memory(self, fresh_state):
        state = fresh_state.replace(pc=jnp.asarray(0xFFF, dtype=jnp.uint16))
        with pytest.raises(AddressOutOfRange):
            fetch(state)


class TestClock:
    """Test full clock cycles."""

    def test_clock_runs_program(self, fresh_state):
        state = load_rom(fresh_state, rom(0x6005, 0x7003, 0x8104))
        for _ in range(3):
            state = clock(state)

        assert state.V[0] == 8
        assert state.V[1] == 8
        assert state.pc == 0x206

    def test_skip_advances_past_next_instruction(self, fresh_state):
        state = load_rom(fresh_state, rom(0x3000, 0x6A01, 0x6B01))
        state = clock(state)
        assert state.pc == 0x204
        state = clock(state)
        assert state.V[0xA] == 0
        assert state.V[0xB] == 1

    def test_call_return_restores_pc_and_sp(self, fresh_state):
        """CALL then RET resumes after the call with SP unchanged."""
        program = rom(0x1204, 0x0000, 0x2208, 0x0000, 0x00EE)
        state = load_rom(fresh_state, program)
        state = clock(state)  # jump to 0x204
        p = int(state.pc)
        sp = int(state.stack.pointer)

        state = clock(state)  # CALL 0x208
        assert state.pc == 0x208
        state = clock(state)  # RET

        assert state.pc == p + 2
        assert state.stack.pointer == sp

    def test_clock_stack_underflow(self, fresh_state):
        state = load_rom(fresh_state, rom(0x00EE))
        with pytest.raises(StackUnderflow):
            clock(state)


class TestWaitForKey:
    """Test the RUNNING / AWAITING_KEY state machine."""

    def test_pc_held_while_waiting(self, fresh_state):
        state = load_rom(fresh_state, rom(0xF50A, 0x6101))
        state = clock(state)
        assert state.status == EngineStatus.AWAITING_KEY
        held_pc = int(state.pc)

        for _ in range(5):
            state = clock(state)
            assert state.pc == held_pc
            assert state.status == EngineStatus.AWAITING_KEY
        assert state.V[1] == 0

    def test_fetch_while_waiting_redecodes(self, fresh_state):
        state = load_rom(fresh_state, rom(0xF50A, 0x6101))
        state = clock(state)

        state, instruction = fetch(state)
        assert instruction == 0xF50A
        assert state.pc == 0x202

    def test_key_press_resumes(self, fresh_state):
        state = load_rom(fresh_state, rom(0xF50A, 0x6101))
        state = clock(state)
        state = clock(state)

        state = set_keypress(state, 0x7, True)
        state = clock(state)
        assert state.V[5] == 0x7
        assert state.status == EngineStatus.RUNNING
        assert state.pc == 0x202

        state = clock(state)
        assert state.pc == 0x204
        assert state.V[1] == 1


class TestTimers:
    """Test external timer ticks."""

    def test_tick_decrements(self, fresh_state):
        state = execute(fresh_state, 0x6003)
        state = execute(state, 0xF015)
        state = execute(state, 0xF018)

        state = tick_timers(state)

        assert state.delay_timer == 2
        assert state.sound_timer == 2

    def test_tick_floors_at_zero(self, fresh_state):
        state = execute(fresh_state, 0x6001)
        state = execute(state, 0xF015)
        for _ in range(3):
            state = tick_timers(state)
        assert state.delay_timer == 0
        assert state.sound_timer == 0

    def test_clock_does_not_tick(self, fresh_state):
        state = load_rom(fresh_state, rom(0x6005, 0xF015, 0x1204))
        for _ in range(10):
            state = clock(state)
        assert state.delay_timer == 5


class TestKeypad:
    """Test the keypad contract."""

    def test_press_and_release(self, fresh_state):
        state = set_keypress(fresh_state, 0xF, True)
        assert state.keypad[0xF]
        state = set_keypress(state, 0xF, False)
        assert not state.keypad[0xF]

    @pytest.mark.parametrize("key", [-1, 16, 255, "a", 1.0, None])
    def test_invalid_key(self, fresh_state, key):
        with pytest.raises(InvalidArgument):
            set_keypress(fresh_state, key, True)
        assert not fresh_state.keypad.any()

    def test_invalid_key_is_value_error(self, fresh_state):
        with pytest.raises(ValueError):
            set_keypress(fresh_state, 16, True)
