"""Tests for control flow instructions."""

import pytest
from polychip8 import execute, set_keypress, StackOverflow, StackUnderflow
from polychip8.stack import push, pop
from polychip8.state import StackState


class TestJump:
    """Test jump instructions."""

    def test_execute_jump(self, fresh_state):
        """1NNN - Jump to address."""
        state = execute(fresh_state, 0x1001)
        assert state.pc == 1

    def test_jump_with_offset(self, fresh_state):
        """BNNN - Jump with V0 offset."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0x6230)  # V2 = 0x30, ignored
        state = execute(state, 0xB250)  # Jump to 0x250 + V0
        assert state.pc == 0x260


class TestCallReturn:
    """Test subroutine calls and stack discipline."""

    def test_call_pushes_return_address(self, fresh_state):
        """2NNN - Push PC then jump."""
        state = execute(fresh_state, 0x2300)

        assert state.pc == 0x300
        assert state.stack.pointer == 1
        assert state.stack.data[0] == 0x200

    def test_call_then_return(self, fresh_state):
        """2NNN followed by 00EE restores PC and SP."""
        state = execute(fresh_state, 0x2300)
        state = execute(state, 0x00EE)

        assert state.pc == 0x200
        assert state.stack.pointer == 0

    def test_nested_calls(self, fresh_state):
        """Returns unwind in reverse order."""
        state = execute(fresh_state, 0x2300)
        state = execute(state, 0x2400)
        assert state.stack.pointer == 2

        state = execute(state, 0x00EE)
        assert state.pc == 0x300
        state = execute(state, 0x00EE)
        assert state.pc == 0x200

    def test_stack_overflow(self, fresh_state):
        """2NNN - Fails once fifteen return addresses are stacked."""
        state = fresh_state
        for _ in range(15):
            state = execute(state, 0x2300)
        assert state.stack.pointer == 15

        with pytest.raises(StackOverflow):
            execute(state, 0x2400)

        assert state.pc == 0x300
        assert state.stack.pointer == 15

    def test_stack_underflow(self, fresh_state):
        """00EE - Fails with an empty stack."""
        with pytest.raises(StackUnderflow):
            execute(fresh_state, 0x00EE)

        assert fresh_state.pc == 0x200
        assert fresh_state.stack.pointer == 0

    def test_stack_errors_report_caller_pc(self):
        """Overflow and underflow carry the PC of the failing instruction."""
        with pytest.raises(StackUnderflow, match="PC=0x0ABC") as excinfo:
            pop(StackState(), 0xABC)
        assert excinfo.value.pc == 0xABC

        stack = StackState()
        for address in range(15):
            stack = push(stack, 0x200 + 2 * address, 0x200)
        with pytest.raises(StackOverflow, match="PC=0x0346") as excinfo:
            push(stack, 0x300, 0x346)
        assert excinfo.value.pc == 0x346
        assert excinfo.value.depth == 15

    def test_underflow_reports_ret_address(self, fresh_state):
        state = fresh_state.replace(pc=fresh_state.pc + 0x10)
        with pytest.raises(StackUnderflow) as excinfo:
            execute(state, 0x00EE)
        assert excinfo.value.pc == 0x210


class TestSkipInstructions:
    """Test all skip instruction variants."""

    def test_skip_if_equal_immediate_true(self, fresh_state):
        """3XNN - Should skip when VX == NN."""
        state = fresh_state.replace(V=fresh_state.V.at[5].set(0x42))
        initial_pc = state.pc

        state = execute(state, 0x3542)
        assert state.pc == initial_pc + 2

    def test_skip_if_equal_immediate_false(self, fresh_state):
        """3XNN - Should not skip when VX != NN."""
        state = fresh_state.replace(V=fresh_state.V.at[5].set(0x41))
        initial_pc = state.pc

        state = execute(state, 0x3542)
        assert state.pc == initial_pc

    def test_skip_if_not_equal_immediate_true(self, fresh_state):
        """4XNN - Should skip when VX != NN."""
        state = fresh_state.replace(V=fresh_state.V.at[3].set(0x10))
        initial_pc = state.pc

        state = execute(state, 0x4320)
        assert state.pc == initial_pc + 2

    def test_skip_if_not_equal_immediate_false(self, fresh_state):
        """4XNN - Should not skip when VX == NN."""
        state = fresh_state.replace(V=fresh_state.V.at[3].set(0x20))
        initial_pc = state.pc

        state = execute(state, 0x4320)
        assert state.pc == initial_pc

    def test_skip_if_equal_register(self, fresh_state):
        """5XY0 - Skip only when VX == VY."""
        state = fresh_state.replace(V=fresh_state.V.at[1].set(0x55).at[2].set(0x55))
        assert execute(state, 0x5120).pc == 0x202

        state = state.replace(V=state.V.at[2].set(0x44))
        assert execute(state, 0x5120).pc == 0x200

    def test_skip_if_not_equal_register(self, fresh_state):
        """9XY0 - Skip only when VX != VY."""
        state = fresh_state.replace(V=fresh_state.V.at[7].set(0xAA).at[8].set(0xBB))
        assert execute(state, 0x9780).pc == 0x202

        state = state.replace(V=state.V.at[8].set(0xAA))
        assert execute(state, 0x9780).pc == 0x200

    def test_register_skips_ignore_low_nibble(self, fresh_state):
        """5XYN / 9XYN - The low nibble does not change the comparison."""
        state = fresh_state.replace(V=fresh_state.V.at[0xA].set(7).at[0xB].set(7))
        assert execute(state, 0x5AB1).pc == 0x202
        assert execute(state, 0x9ABF).pc == 0x200

        state = state.replace(V=state.V.at[0xB].set(8))
        assert execute(state, 0x5AB1).pc == 0x200
        assert execute(state, 0x9ABF).pc == 0x202

    def test_skip_boundary_values(self, fresh_state):
        """Test skip instructions with boundary values."""
        assert execute(fresh_state, 0x3000).pc == 0x202  # V0 == 0

        state = fresh_state.replace(V=fresh_state.V.at[0].set(0xFF))
        assert execute(state, 0x30FF).pc == 0x202


class TestKeySkips:
    """Test EX9E / EXA1."""

    def test_skip_if_key_pressed(self, fresh_state):
        """EX9E - Skip when key VX is down."""
        state = fresh_state.replace(V=fresh_state.V.at[2].set(0xA))
        assert execute(state, 0xE29E).pc == 0x200

        state = set_keypress(state, 0xA, True)
        assert execute(state, 0xE29E).pc == 0x202

    def test_skip_if_key_not_pressed(self, fresh_state):
        """EXA1 - Skip when key VX is up."""
        state = fresh_state.replace(V=fresh_state.V.at[2].set(0x3))
        assert execute(state, 0xE2A1).pc == 0x202

        state = set_keypress(state, 0x3, True)
        assert execute(state, 0xE2A1).pc == 0x200

    def test_other_keys_do_not_count(self, fresh_state):
        """EX9E - Only the key named by VX matters."""
        state = set_keypress(fresh_state, 0x4, True)
        state = state.replace(V=state.V.at[0].set(0x5))
        assert execute(state, 0xE09E).pc == 0x200
