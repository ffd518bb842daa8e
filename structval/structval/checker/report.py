# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Result reporting for the document checker."""

from pathlib import Path
from typing import Any, Dict, List, Optional


class CheckResult:
    """Container for checking results for a single instance file."""

    def __init__(self, file_path: Path):
        """Initialize check result.

        Args:
            file_path: Path to the instance file being checked
        """
        self.file_path = file_path
        self.errors: List[Dict[str, Any]] = []

    @property
    def valid(self) -> bool:
        return not self.errors

    def add_error(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        json_pointer: Optional[str] = None,
        keyword: Optional[str] = None,
    ):
        """Add an error message.

        Args:
            message: Error message
            line: Optional line number where error occurred
            column: Optional column where error occurred
            json_pointer: Optional location of the offending value
            keyword: Optional schema keyword that failed
        """
        error = {'message': message}
        if line is not None:
            error['line'] = line
        if column is not None:
            error['column'] = column
        if json_pointer is not None:
            error['json_pointer'] = json_pointer
        if keyword is not None:
            error['keyword'] = keyword
        self.errors.append(error)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'file': str(self.file_path),
            'valid': self.valid,
            'errors': self.errors,
        }
