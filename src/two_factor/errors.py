# Copyright (c) 2025
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.


class TwoFactorError(Exception):
    """Base class for errors raised by the two_factor package."""


class InvalidArgument(TwoFactorError, ValueError):
    """A public operation received a malformed argument."""


class InvalidEncoding(TwoFactorError, ValueError):
    """
    A Base32 string contained a character outside the alphabet.

    :param ordinal: The ordinal value of the offending character
    """

    def __init__(self, ordinal: int):
        self.ordinal = ordinal
        super().__init__(f'Encoded string is invalid. Contains unknown char #{ordinal}')


class NoSecureRandomness(TwoFactorError, RuntimeError):
    """The operating system could not supply cryptographically secure random bytes."""
