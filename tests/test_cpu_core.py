import pytest

from chip8.cpu_core import CPU
from chip8.display import HEIGHT, PIXEL_OFF, WIDTH
from chip8.errors import StackOverflowError, StackUnderflowError
from chip8.font import glyph_address
from chip8.random_source import ScriptedRandomSource
from chip8.registers import FLAG


def make_cpu(*words, rng=None):
    cpu = CPU(rng or ScriptedRandomSource([0xAA]))
    cpu.load_rom(b"".join(w.to_bytes(2, "big") for w in words))
    return cpu


def test_fetch_advances_pc_before_execute():
    cpu = make_cpu(0x6005)
    ins = cpu.step()
    assert ins.word == 0x6005
    assert cpu.reg.ir == 0x6005
    assert cpu.reg.pc == 0x202
    assert cpu.reg[0] == 5


def test_jump():
    cpu = make_cpu(0x1300)
    cpu.step()
    assert cpu.reg.pc == 0x300
    assert cpu.reg.sp == 0
    assert cpu.reg.stack == [0] * 16


def test_call_and_return():
    cpu = make_cpu(0x2300)
    cpu.mem.write(0x300, 0x00)
    cpu.mem.write(0x301, 0xEE)
    cpu.step()
    assert cpu.reg.pc == 0x300
    assert cpu.reg.sp == 1
    cpu.step()
    assert cpu.reg.pc == 0x202
    assert cpu.reg.sp == 0


def test_return_on_empty_stack():
    cpu = make_cpu(0x00EE)
    with pytest.raises(StackUnderflowError):
        cpu.step()
    assert cpu.reg.pc == 0x200
    assert cpu.reg.sp == 0


def test_call_overflow():
    cpu = make_cpu(0x2200)    # calls itself forever
    cpu.run(16)
    assert cpu.reg.sp == 16
    with pytest.raises(StackOverflowError):
        cpu.step()
    assert cpu.reg.sp == 16
    assert cpu.reg.pc == 0x200
    assert cpu.reg.ir == 0x2200
    # stepping again faults on the same CALL instead of skipping it
    with pytest.raises(StackOverflowError):
        cpu.step()
    assert cpu.reg.pc == 0x200


@pytest.mark.parametrize("program,skipped", [
    ((0x6007, 0x3007), True),
    ((0x6007, 0x3008), False),
    ((0x6007, 0x4008), True),
    ((0x6007, 0x4007), False),
    ((0x6007, 0x6107, 0x5010), True),
    ((0x6007, 0x6108, 0x5010), False),
    ((0x6007, 0x6108, 0x9010), True),
    ((0x6007, 0x6107, 0x9010), False),
])
def test_conditional_skips(program, skipped):
    cpu = make_cpu(*program)
    cpu.run(len(program))
    end = 0x200 + 2 * len(program)
    assert cpu.reg.pc == (end + 2 if skipped else end)


def test_add_immediate_wraps_without_flag():
    cpu = make_cpu(0x60FF, 0x7002)
    cpu.reg[FLAG] = 0x7
    cpu.run(2)
    assert cpu.reg[0] == 0x01
    assert cpu.reg[FLAG] == 0x7


def test_add_registers_sets_carry():
    cpu = make_cpu(0x8014)
    cpu.reg[0] = 0xFF
    cpu.reg[1] = 0x01
    cpu.step()
    assert cpu.reg[0] == 0x00
    assert cpu.reg[FLAG] == 0x01


@pytest.mark.parametrize("a,b", [(0, 0), (1, 0xFF), (0x7F, 0x80), (0xFF, 0xFF), (0x10, 0x20)])
def test_add_flag_property(a, b):
    cpu = make_cpu(0x8124)
    cpu.reg[1], cpu.reg[2] = a, b
    cpu.step()
    assert cpu.reg[1] == (a + b) % 256
    assert cpu.reg[FLAG] == int(a + b > 255)


@pytest.mark.parametrize("a,b", [(5, 3), (3, 5), (9, 9), (0, 1), (0xFF, 0)])
def test_sub_borrow_property(a, b):
    cpu = make_cpu(0x8125)
    cpu.reg[1], cpu.reg[2] = a, b
    cpu.step()
    assert cpu.reg[1] == (a - b) % 256
    assert cpu.reg[FLAG] == int(a >= b)


def test_subn():
    cpu = make_cpu(0x8127)
    cpu.reg[1], cpu.reg[2] = 3, 10
    cpu.step()
    assert cpu.reg[1] == 7
    assert cpu.reg[FLAG] == 1


def test_logic_ops_are_bitwise():
    cpu = make_cpu(0x8011, 0x8232, 0x8453)
    cpu.reg[0], cpu.reg[1] = 0b1100, 0b1010
    cpu.reg[2], cpu.reg[3] = 0b1100, 0b1010
    cpu.reg[4], cpu.reg[5] = 0b1100, 0b1010
    cpu.run(3)
    assert cpu.reg[0] == 0b1110
    assert cpu.reg[2] == 0b1000
    assert cpu.reg[4] == 0b0110


def test_shifts():
    cpu = make_cpu(0x8106, 0x820E)
    cpu.reg[1] = 0b0000_0101
    cpu.reg[2] = 0b1000_0001
    cpu.step()
    assert (cpu.reg[1], cpu.reg[FLAG]) == (0b10, 1)
    cpu.step()
    assert (cpu.reg[2], cpu.reg[FLAG]) == (0b10, 1)


def test_flag_register_as_destination_holds_flag():
    cpu = make_cpu(0x8F04)
    cpu.reg[0xF] = 0x10
    cpu.reg[0x0] = 0x20
    cpu.step()
    assert cpu.reg[FLAG] == 0


def test_load_register():
    cpu = make_cpu(0x6A42, 0x8BA0)
    cpu.run(2)
    assert cpu.reg[0xB] == 0x42


def test_index_and_indexed_jump():
    cpu = make_cpu(0xA123, 0x6010, 0xB300)
    cpu.run(3)
    assert cpu.reg.i == 0x123
    assert cpu.reg.pc == 0x310


def test_random_is_masked():
    cpu = make_cpu(0xC30F, 0xC4F0, rng=ScriptedRandomSource([0xAB, 0xCD]))
    cpu.run(2)
    assert cpu.reg[3] == 0x0B
    assert cpu.reg[4] == 0xC0


def test_clear_screen():
    cpu = make_cpu(0x00E0)
    for y in range(HEIGHT):
        cpu.display.draw_sprite(0, y, [0xFF] * 8)
    cpu.step()
    assert all(p == PIXEL_OFF for p in cpu.display.pixels)


def test_draw_twice_collides():
    cpu = make_cpu(0xA300, 0xD011, 0xD011)
    cpu.mem.write(0x300, 0x80)
    cpu.run(2)
    assert cpu.display.is_on(0, 0)
    assert cpu.reg[FLAG] == 0
    cpu.step()
    assert not cpu.display.is_on(0, 0)
    assert cpu.reg[FLAG] == 1


def test_draw_does_not_clear_flag():
    cpu = make_cpu(0xA300, 0xD011)
    cpu.mem.write(0x300, 0x80)
    cpu.reg[FLAG] = 1
    cpu.run(2)
    assert cpu.reg[FLAG] == 1


def test_draw_wraps_origin_and_clips_edges():
    cpu = make_cpu(0xA300, 0xD012)
    cpu.mem.write(0x300, 0xFF)
    cpu.mem.write(0x301, 0xFF)
    cpu.reg[0] = WIDTH + WIDTH - 4    # wraps to x=60
    cpu.reg[1] = HEIGHT - 1
    cpu.run(2)
    lit = [x for x in range(WIDTH) if cpu.display.is_on(x, HEIGHT - 1)]
    assert lit == [60, 61, 62, 63]
    assert not any(cpu.display.is_on(x, 0) for x in range(WIDTH))


def test_draw_digit_glyph():
    cpu = make_cpu(0x6007, 0xF029, 0xD125)
    cpu.run(3)
    assert cpu.reg.i == glyph_address(7)
    # glyph "7": F0 10 20 40 40
    assert [cpu.display.is_on(x, 0) for x in range(4)] == [True] * 4
    assert cpu.display.is_on(3, 1)
    assert cpu.display.is_on(1, 4)


def test_key_skips():
    cpu = make_cpu(0x6105, 0xE19E, 0x0000, 0xE1A1)
    cpu.keypad.press(5)
    cpu.run(2)
    assert cpu.reg.pc == 0x206
    cpu.step()      # ExA1 with the key held does not skip
    assert cpu.reg.pc == 0x208


def test_key_skip_uses_low_nibble_of_register():
    cpu = make_cpu(0x6115, 0xE19E)
    cpu.keypad.press(5)
    cpu.run(2)
    assert cpu.reg.pc == 0x206


def test_wait_for_key_busy_waits():
    cpu = make_cpu(0xF30A)
    cpu.reg.delay_timer = 3
    for _ in range(3):
        cpu.step()
        assert cpu.reg.pc == 0x200
    assert cpu.reg.delay_timer == 0
    cpu.keypad.press(0xB)
    cpu.keypad.press(0x4)
    cpu.step()
    assert cpu.reg[3] == 0x4
    assert cpu.reg.pc == 0x202


def test_timer_instructions():
    cpu = make_cpu(0x6A09, 0xFA15, 0xFA18, 0xFB07)
    cpu.run(3)
    # each cycle ends with a tick, including the one that set the timer
    assert cpu.reg.delay_timer == 7
    assert cpu.reg.sound_timer == 8
    cpu.step()
    assert cpu.reg[0xB] == 7
    assert cpu.reg.delay_timer == 6


def test_add_to_index_leaves_flag():
    cpu = make_cpu(0xAFFF, 0x6102, 0xF11E)
    cpu.reg[FLAG] = 0
    cpu.run(3)
    assert cpu.reg.i == 0x1001
    assert cpu.reg[FLAG] == 0


def test_bcd():
    cpu = make_cpu(0xA400, 0x627B, 0xF233)
    cpu.run(3)
    assert cpu.mem.dump(0x400, 3) == bytes([1, 2, 3])


def test_store_and_load_registers():
    cpu = make_cpu(0xA500, 0xF355, 0xA500, 0xF265)
    for r in range(5):
        cpu.reg[r] = 0x10 + r
    cpu.run(2)
    assert cpu.mem.dump(0x500, 5) == bytes([0x10, 0x11, 0x12, 0x13, 0])
    assert cpu.reg.i == 0x500
    cpu.reg.v = [0] * 16
    cpu.run(2)
    assert cpu.reg.v[:4] == [0x10, 0x11, 0x12, 0]


def test_reset_restores_power_on_state():
    rng = ScriptedRandomSource([1])
    cpu = make_cpu(0x6001, 0x2300, rng=rng)
    cpu.keypad.press(1)
    cpu.run(2)
    cpu.reset()
    assert cpu.reg.pc == 0x200
    assert cpu.reg.v == [0] * 16
    assert cpu.reg.sp == 0
    assert cpu.mem.read_word(0x200) == 0
    assert cpu.keypad.first_pressed() is None
    assert cpu.rng is rng


def test_load_rom_file(tmp_path):
    rom = tmp_path / "jump.ch8"
    rom.write_bytes(bytes([0x13, 0x00]))
    cpu = CPU(ScriptedRandomSource([0]))
    assert cpu.load_rom_file(rom) is True
    cpu.step()
    assert cpu.reg.pc == 0x300


def test_load_missing_rom_file(tmp_path):
    cpu = CPU(ScriptedRandomSource([0]))
    assert cpu.load_rom_file(tmp_path / "missing.ch8") is False
    assert cpu.mem.read_word(0x200) == 0
