# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

from s3cleaner.cli import main

if __name__ == "__main__":
    main()
