from screenshot_action.console import console


def verbose_callback(value: bool) -> None:
    console.quiet = not value
