from enum import Enum

from rich.pretty import pprint

from switchyard import *


class Verbosity(Enum):
    quiet = "quiet"
    normal = "normal"
    detailed = "detailed"


registry = Registry()


@registry.register
class Pack(Command, name="pack", descr="create a package from a spec file"):
    output = Option("o", descr="output directory")
    verbosity = Option(type=Verbosity, descr="quiet, normal or detailed")
    symbols = Option(type=bool, descr="include symbols")
    exclude = Option(type=list, descr="patterns to exclude, separated by ';'")
    properties = Option("p", type=dict, descr="key=value pairs, separated by ';'")

    def execute(self):
        pprint(self)


if __name__ == '__main__':
    invoke(registry)
