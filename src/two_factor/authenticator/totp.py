# MIT License
#
# Copyright (c) 2023
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

import logging
import secrets
import struct
import time
from typing import Callable, Optional, Union

from cryptography.hazmat.primitives import constant_time, hashes, hmac

from two_factor.authenticator import settings
from two_factor.codec import base32
from two_factor.errors import InvalidArgument, NoSecureRandomness

logger = logging.getLogger(__name__)

TIME_STEP = 30
MIN_SECRET_LENGTH = 16
MAX_SECRET_LENGTH = 128


def slice_time(timestamp: Optional[float] = None) -> int:
    """
    Return the 30 second slice of time that contains timestamp.

    Args:
        timestamp: Unix timestamp in seconds.  If None, the current time is used.

    Returns:
        The time slice counter
    """
    if timestamp is None:
        timestamp = time.time()

    return int(timestamp // TIME_STEP)


def generate_secret(length: Optional[int] = None) -> str:
    """
    Generate a new random shared secret.

    The returned string is the Base32 encoding of length random bytes cut down to
    length characters, so its length always equals the requested length.

    Args:
        length: Number of random bytes and characters (default: totp_secret_length or 16)

    Returns:
        Base32 encoded shared secret
    """
    if length is None:
        length = settings.secret_length()

    if length < MIN_SECRET_LENGTH or length > MAX_SECRET_LENGTH:
        raise InvalidArgument(f'Secret length must be {MIN_SECRET_LENGTH} <= length <= {MAX_SECRET_LENGTH}')

    try:
        random_bytes = secrets.token_bytes(length)

    except (NotImplementedError, OSError) as e:
        logger.error(f'Unable to read secure random bytes: {str(e)}')
        raise NoSecureRandomness('No source of secure randomness') from e

    logger.debug(f'Generated a shared secret of length {length}.')
    return base32.encode(random_bytes)[:length]


def derive_code(secret: str, length: int = 6, time_slice: Optional[int] = None) -> str:
    """
    Generate the code for a shared secret and a slice of time.

    Args:
        secret: Base32 encoded shared secret
        length: Number of digits in the generated code (default: 6)
        time_slice: Time slice counter.  If None, the current slice is used.

    Returns:
        TOTP code as a string
    """
    if time_slice is None:
        time_slice = slice_time()

    # Only the low 32 bits of the counter are packed, the high word is zero
    time_bytes = struct.pack('>II', 0, time_slice & 0xFFFFFFFF)

    key = base32.decode(secret)

    # Calculate HMAC-SHA1 hash
    h = hmac.HMAC(key, hashes.SHA1())
    h.update(time_bytes)
    digest = h.finalize()

    # Dynamic truncation
    offset = digest[-1] & 0x0F
    binary = struct.unpack('>I', digest[offset:offset + 4])[0] & 0x7FFFFFFF

    return str(binary % (10 ** length)).zfill(length)


def otp_auth_string(account_name: str, secret: str, issuer: Optional[str] = None) -> str:
    """
    Generate the otpauth URI that provisions an authenticator app, usually rendered as a QR code.

    Neither the account name nor the issuer may contain a colon.  When an issuer is given it
    prefixes the label and is repeated as the issuer parameter, so older apps that only read
    the label still show it.  Components are not percent encoded; callers must pass URI safe
    values.

    Args:
        account_name: Account name, e.g. "John.Doe@gmail.com"
        secret: Base32 encoded shared secret
        issuer: Optional issuer, e.g. "Foo ltd"

    Returns:
        otpauth://totp/<label>?secret=<secret>[&issuer=<issuer>]
    """
    if account_name == '' or ':' in account_name:
        raise InvalidArgument(
            f'The account name may not contain a colon (:) and may not be an empty string. Given "{account_name}".'
        )

    if secret == '':
        raise InvalidArgument('The secret may not be an empty string.')

    label = account_name
    if issuer is not None:
        if issuer == '' or ':' in issuer:
            raise InvalidArgument(
                f'The issuer may not contain a colon (:) and may not be an empty string. Given "{issuer}".'
            )

        label = f'{issuer}:{account_name}'
        return f'otpauth://totp/{label}?secret={secret}&issuer={issuer}'

    return f'otpauth://totp/{label}?secret={secret}'


class TimeBasedOneTimePassword:
    """
    Implementation of Time-Based One-Time Password (TOTP) according to RFC 6238.

    Codes are compatible with Google Authenticator: HMAC-SHA1, 30 second steps and a
    padding-free Base32 secret.  An instance holds only its secret, code length and
    clock, so one instance may be shared between threads.
    """

    def __init__(self, shared_secret: str, length: Optional[int] = None,
                 clock: Callable[[], float] = time.time):
        """
        Initialize the TOTP verifier for a shared secret.

        Args:
            shared_secret: Base32 encoded shared secret
            length: Number of digits in a code (default: totp_code_length or 6)
            clock: Returns the current Unix time; replaced in tests
        """
        if length is None:
            length = settings.code_length()

        if length < 1:
            raise InvalidArgument(f'Code length must be at least 1. Given {length}.')

        self._shared_secret = shared_secret
        self._length = length
        self._clock = clock

    @property
    def shared_secret(self) -> str:
        return self._shared_secret

    @property
    def length(self) -> int:
        return self._length

    def current_slice(self) -> int:
        return slice_time(self._clock())

    def remaining_seconds(self) -> int:
        """Return the seconds remaining in the current 30 second window."""
        return TIME_STEP - (int(self._clock()) % TIME_STEP)

    def code(self, time_slice: Optional[int] = None) -> str:
        """
        Generate the code for a slice of time.

        Args:
            time_slice: Time slice counter.  If None, the current slice is used.

        Returns:
            TOTP code as a string
        """
        if time_slice is None:
            time_slice = self.current_slice()

        return derive_code(self._shared_secret, self._length, time_slice)

    def verify(self, code: Union[str, int], discrepancy: Optional[int] = None,
               time_slice: Optional[int] = None) -> bool:
        """
        Verify a code, accepting codes from discrepancy slices either side of time_slice.

        A code of the wrong length is rejected without computing anything.  Both a
        malformed code and a wrong code return False; this method never raises for the
        code argument.

        Args:
            code: The submitted code.  Integers are converted with str, so leading zeros are lost.
            discrepancy: Time slices either side to check (default: totp_discrepancy or 1)
            time_slice: Time slice counter.  If None, the current slice is used.

        Returns:
            True if the code matches any slice in the window
        """
        code = str(code)
        if len(code) != self._length:
            return False

        if discrepancy is None:
            discrepancy = settings.discrepancy()

        if time_slice is None:
            time_slice = self.current_slice()

        submitted = code.encode('utf_8')
        for offset in range(-discrepancy, discrepancy + 1):
            calculated = self.code(time_slice + offset)
            if constant_time.bytes_eq(calculated.encode('utf_8'), submitted):
                logger.info(f'Code accepted at offset {offset}.')
                return True

        logger.info('Code rejected.')
        return False

    def provisioning_uri(self, account_name: str, issuer: Optional[str] = None) -> str:
        """Return the otpauth URI for this secret."""
        return otp_auth_string(account_name, self._shared_secret, issuer)
