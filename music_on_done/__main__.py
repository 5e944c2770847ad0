from music_on_done.cli import run

run()
