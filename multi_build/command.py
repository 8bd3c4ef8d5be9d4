import subprocess


class Command:
    def __init__(self, command: list[str]):
        self.command = command
        self.process = None

    def start(self):
        self.process = subprocess.Popen(
            self.command,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",
        )

    @property
    def output_lines(self):
        if not self.process:
            raise Exception(f"Command {self.pretty_command} not started")
        for line in self.process.stdout:
            line = line.strip()
            yield line

    @property
    def return_value(self):
        return self.process.wait()

    @property
    def pretty_command(self):
        return " ".join(str(part) for part in self.command)
