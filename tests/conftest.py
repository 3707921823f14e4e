"""
Test Configuration and Utilities

Common base classes and helper functions for wiremap tests
"""

import importlib
import os
import shutil
import sys
import tempfile
import textwrap
import time
import unittest
from typing import Optional

# Fixed timestamps keep mtime comparisons independent of the clock
PAST = int(time.time()) - 10_000
FUTURE = int(time.time()) + 10_000


class ProjectTestCase(unittest.TestCase):
    """
    Base test case providing a throwaway project directory.

    Layout::

        <base>/app.py        anchor file (composition root)
        <base>/src/          source root, on sys.path during the test
        <base>/cache/        cache directory (created by the store)

    Modules imported from the project are removed from sys.modules after
    each test so that tests can reuse module names.
    """

    def setUp(self):
        self.base = os.path.realpath(tempfile.mkdtemp(prefix="wiremap-"))
        self.src = os.path.join(self.base, "src")
        os.makedirs(self.src)
        self.anchor = self.write_file("app.py", "# composition root\n", mtime=PAST)

        self._dont_write_bytecode = sys.dont_write_bytecode
        sys.dont_write_bytecode = True
        sys.path.insert(0, self.src)
        importlib.invalidate_caches()

    def tearDown(self):
        while self.src in sys.path:
            sys.path.remove(self.src)
        for name, module in list(sys.modules.items()):
            module_file = getattr(module, "__file__", None) or ""
            if module_file.startswith(self.base):
                del sys.modules[name]
        sys.dont_write_bytecode = self._dont_write_bytecode
        shutil.rmtree(self.base, ignore_errors=True)

    def write_file(self, relative_path: str, content: str, mtime: Optional[int] = None) -> str:
        """Write a file under the project directory and optionally set its mtime."""
        path = os.path.join(self.base, relative_path)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(textwrap.dedent(content))
        if mtime is not None:
            self.touch(path, mtime)
        return path

    def write_source(self, relative_path: str, content: str, mtime: int = PAST) -> str:
        """Write a module under ``src/``. Defaults to an old mtime."""
        return self.write_file(os.path.join("src", relative_path), content, mtime=mtime)

    @staticmethod
    def touch(path: str, mtime: float) -> None:
        os.utime(path, (mtime, mtime))
