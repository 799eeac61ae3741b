# Copyright (c) 2025
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""
Padding-free Base32 (RFC 4648 alphabet) as used by Google Authenticator secrets.

Unlike ``base64.b32encode`` the encoder never emits ``=`` and the decoder does not
require the input length to be a multiple of eight.
"""

from typing import Union

from two_factor.errors import InvalidEncoding

ALPHABET = 'ABCDEFGHIJKLMNOPQRSTUVWXYZ234567'

# '=' resolves to 32 on decode; it is never produced by encode.
_DECODE_TABLE = ALPHABET + '='


def encode(data: Union[bytes, str]) -> str:
    """
    Base32 encode data without padding.

    :param data: The bytes to encode.  A str is encoded as UTF-8 first.
    :return: The upper case Base32 string
    """
    if isinstance(data, str):
        data = data.encode('utf_8')

    encoded = []
    remainder = 0
    remainder_size = 0

    for byte in data:
        remainder = (remainder << 8) | byte
        remainder_size += 8
        while remainder_size > 4:
            remainder_size -= 5
            encoded.append(ALPHABET[(remainder >> remainder_size) & 31])

        remainder &= (1 << remainder_size) - 1

    if remainder_size > 0:
        # Zero fill the low end of the last group
        remainder <<= 5 - remainder_size
        encoded.append(ALPHABET[remainder & 31])

    return ''.join(encoded)


def decode(encoded: str) -> bytes:
    """
    Base32 decode a string, case-insensitively.

    Bits left over once the last full byte is emitted are dropped.

    :param encoded: The Base32 string
    :return: The decoded bytes
    :raises InvalidEncoding: If the string contains a character outside the alphabet
    """
    buffer = 0
    buffer_size = 0
    decoded = bytearray()

    for char in encoded:
        # Only ASCII letters are case folded
        value = _DECODE_TABLE.find(char.upper()) if char.isascii() else -1
        if value == -1:
            raise InvalidEncoding(ord(char))

        buffer = (buffer << 5) | value
        buffer_size += 5
        if buffer_size > 7:
            buffer_size -= 8
            decoded.append((buffer >> buffer_size) & 0xFF)
            buffer &= (1 << buffer_size) - 1

    return bytes(decoded)
