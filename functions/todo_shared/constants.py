# Copyright 2025 Google LLC
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
# ==============================================================================

# Route the views navigate to after sign-up, login and logout.
HOME_ROUTE = "/"

# Distance (px) from the viewport edge that triggers auto-scroll while dragging.
DRAG_SCROLL_THRESHOLD = 100
# Pixels scrolled per drag-over event inside the threshold.
DRAG_SCROLL_STEP = 10

# Identity Toolkit accepts passwords of at least this length.
MIN_PASSWORD_LENGTH = 6
