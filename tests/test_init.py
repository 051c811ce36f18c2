# This source code is part of the pdbkit package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import pdbkit


def test_version_number():
    assert hasattr(pdbkit, "__version__")
    assert pdbkit.__version__.count(".") == 2
