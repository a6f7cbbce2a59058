#!/usr/bin/env python3
"""
Client Map - Menu Launcher
Numbered menu over the clientmap CLI, for people who would rather not type commands.

Usage:
    python main.py
"""

import os
import subprocess
import sys

ROOT = os.path.dirname(os.path.abspath(__file__))
CLI = [sys.executable, os.path.join(ROOT, "clientmap", "cli", "main.py")]


def ask(label: str, required: bool = True) -> str:
    suffix = "" if required else " (Enter to skip)"
    while True:
        value = input(f"  {label}{suffix}: ").strip()
        if value or not required:
            return value
        print("  A value is required.")


def ask_yes(label: str) -> bool:
    return input(f"  {label} [y/N]: ").strip().lower() in ("y", "yes")


def with_option(args: list, flag: str, value: str) -> list:
    return args + [flag, value] if value else args


def with_flag(args: list, flag: str, enabled: bool) -> list:
    return args + [flag] if enabled else args


# Each builder asks what it needs and returns the CLI arguments
def list_args():
    return with_option(["clients", "list"], "--search", ask("Name or company contains", required=False))


def show_args():
    return ["clients", "show", ask("Client ID")]


def add_args():
    return with_flag(["clients", "add"], "--gps", ask_yes("Fill location from this device?"))


def edit_args():
    args = ["clients", "edit", ask("Client ID")]
    return with_flag(args, "--gps", ask_yes("Replace location with this device's position?"))


def delete_args():
    return ["clients", "delete", ask("Client ID")]


def map_args():
    args = with_option(["map"], "--output", ask("Output HTML file", required=False))
    return with_option(args, "--focus", ask("Client ID to zoom to", required=False))


ENTRIES = [
    ("List / search clients", list_args),
    ("Client details", show_args),
    ("New client", add_args),
    ("Edit client", edit_args),
    ("Delete client", delete_args),
    ("Write client map (HTML)", map_args),
]


def run_cli(args: list):
    env = dict(os.environ, PYTHONPATH=ROOT)
    print()
    subprocess.run(CLI + args, env=env)
    input("\n  Enter to go back to the menu...")


def show_menu():
    os.system("cls" if os.name == "nt" else "clear")
    print("=" * 44)
    print("   CLIENT MAP")
    print("=" * 44)
    for number, (label, _) in enumerate(ENTRIES, start=1):
        print(f"  {number}.  {label}")
    print("  0.  Quit")
    print("=" * 44)


def main():
    while True:
        show_menu()
        try:
            choice = input("\n  Choice: ").strip().lower()
        except (KeyboardInterrupt, EOFError):
            print()
            return
        if choice in ("0", "q", "quit"):
            return
        if not choice.isdigit() or not 1 <= int(choice) <= len(ENTRIES):
            input(f"  '{choice}' is not on the menu. Enter to continue...")
            continue
        _, build = ENTRIES[int(choice) - 1]
        run_cli(build())


if __name__ == "__main__":
    main()
