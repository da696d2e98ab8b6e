from dmarc_viewer.main import run

run()
