from rich.console import Console

# stdout is reserved for workflow commands like ::set-output
console = Console(stderr=True)
