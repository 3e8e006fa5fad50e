from opportunity_scanner.cli import app

app(prog_name="opportunity-scanner")
