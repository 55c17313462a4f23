from simpleconsole import *

__prog__ = "show-me"


class ShowMe(Console):
    def configure(self):
        # Arguments
        self.add_parameter("name", Console.STRING, "your name", required=True)
        self.add_parameter("age", Console.INT, "your age").set_default(20)

        # Names starting with '-' or '--' declare options
        self.add_parameter("--height", Console.FLOAT, "your height", required=True)
        self.add_parameter("--location|-l", Console.STRING, "live location", required=True)
        self.add_parameter("--muted|-m", Console.BOOLEAN, "is muted")

    def do_execute(self):
        self.writeln("Hello")
        self.writeln("Name: %s" % self.get("name"))
        self.writeln("Age: %s" % self.get("age"))
        self.writeln("Height: %s" % format_number(self.get("height")))
        self.writeln("Location: %s" % self.get("location"))
        self.writeln("Muted: %s" % ("Y" if self.get("muted") else "N"))
        return self.SUCCESS


if __name__ == '__main__':
    ShowMe(
        "show-me",
        header="[Console] SHOW ME - v1.0\n\nThis command can show personal information.",
        epilog=(
            "$ show-me John 18 --location=Europe --height 1.75\n"
            "$ show-me John --location Asia --height=1.62 --muted"
        ),
    ).run()
