# Copyright (c) 2025
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

import os

from two_factor.errors import InvalidArgument


def _read_int(name: str, default: int) -> int:
    value = os.environ.get(name, str(default))
    if not value.isdecimal():
        raise InvalidArgument(f'Environment variable {name} must be a non-negative integer. Given "{value}".')

    return int(value)


def code_length() -> int:
    """Number of digits in a code when an engine is created without one."""
    return _read_int('totp_code_length', 6)


def discrepancy() -> int:
    """Time slices either side of the current one accepted by verify."""
    return _read_int('totp_discrepancy', 1)


def secret_length() -> int:
    """Length of a generated secret when none is requested."""
    return _read_int('totp_secret_length', 16)
