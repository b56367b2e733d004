"""Application entry-point for the CHIP-8 simulator.
Run `python main.py ROM` from the project root to launch the GUI, or add
`--headless N` to execute N cycles without a window and print the screen."""
import argparse
import logging
import sys

from chip8.config import EmulatorConfig
from chip8.errors import Chip8Error
from chip8.memory import read_rom_file

logger = logging.getLogger("chip8")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="CHIP-8 simulator")
    parser.add_argument("rom", help="Path to the ROM image")
    parser.add_argument("--config", type=str, help="JSON configuration file")
    parser.add_argument("--scale", type=int, help="Screen pixels per CHIP-8 pixel")
    parser.add_argument("--delay", type=int, dest="cycle_delay_ms",
                        help="Milliseconds between cycles while running")
    parser.add_argument("--seed", type=int, help="Seed for the RND instruction")
    parser.add_argument("--headless", type=int, metavar="CYCLES",
                        help="Run CYCLES cycles without a window and print the screen")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def load_config(args: argparse.Namespace) -> EmulatorConfig:
    config = EmulatorConfig.load(args.config) if args.config else EmulatorConfig()
    for name in ("scale", "cycle_delay_ms", "seed"):
        value = getattr(args, name)
        if value is not None:
            setattr(config, name, value)
    config.validate()
    return config


def run_headless(rom_path: str, config: EmulatorConfig, cycles: int) -> None:
    from chip8.cpu_core import CPU
    from chip8.random_source import SystemRandomSource

    cpu = CPU(SystemRandomSource(config.seed))
    # An unreadable ROM leaves memory blank, the VM still starts
    cpu.load_rom_file(rom_path)
    cpu.run(cycles)
    print("\n".join(cpu.display.rows()))
    logger.debug("Stopped at PC=0x%03X after %d cycles", cpu.reg.pc, cycles)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config = load_config(args)
    except (OSError, Chip8Error) as e:
        logger.error("Bad configuration: %s", e)
        return 2

    try:
        if args.headless is not None:
            run_headless(args.rom, config, args.headless)
        else:
            from gui.main_window import run
            # the window keeps the image so Reset can reload it
            run(config, read_rom_file(args.rom) or b"")
    except Chip8Error as e:
        logger.error("Emulation stopped: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
