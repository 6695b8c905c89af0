import sys
from unittest.mock import patch

import pytest
from vepvis.constants import SUBCOMMAND
from vepvis.main import main


def run_help(args):
    with patch.object(sys, 'argv', ['vepvis'] + args):
        try:
            returncode = main()
        except SystemExit as err:
            assert err.code == 0
        else:
            assert returncode == 0


class TestHelpMenu:
    def test_main(self):
        run_help(['-h'])

    @pytest.mark.parametrize('command', SUBCOMMAND.values())
    def test_subcommand(self, command):
        run_help([command, '-h'])

    def test_version(self):
        run_help(['-v'])

    def test_bad_option(self):
        with patch.object(sys, 'argv', ['vepvis', SUBCOMMAND.HIERARCHY, '--blargh']):
            with pytest.raises(SystemExit) as err:
                main()
            assert err.value.code == 2
