from treedump.cli import run

run()
