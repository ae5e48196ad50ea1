"""
Test Data Package
================

Sample Taskfiles for the Taskfile to D2 conversion tests.
"""

from .sample_taskfiles import (
    ALL_TEST_TASKFILES,
    get_test_taskfile,
    get_all_valid_taskfiles,
    get_malformed_taskfiles,
    MINIMAL_TASKFILE,
    BUILD_DEPLOY_TASKFILE,
    REQUIRED_VARS_TASKFILE,
    INCLUDES_TASKFILE,
    SILENT_TASKFILE,
    CALLS_TASKFILE,
    UNORDERED_TASKFILE,
    SINGLE_CMD_TASKFILE,
    CMD_AND_CMDS_TASKFILE,
    VERSION_2_TASKFILE,
    INVALID_YAML_TASKFILE,
    WRONG_TYPES_TASKFILE,
    BAD_DEPENDENCY_TASKFILE,
    BAD_REQUIRED_VAR_TASKFILE,
    LIST_ROOT_TASKFILE,
)

__all__ = [
    'ALL_TEST_TASKFILES',
    'get_test_taskfile',
    'get_all_valid_taskfiles',
    'get_malformed_taskfiles',
    'MINIMAL_TASKFILE',
    'BUILD_DEPLOY_TASKFILE',
    'REQUIRED_VARS_TASKFILE',
    'INCLUDES_TASKFILE',
    'SILENT_TASKFILE',
    'CALLS_TASKFILE',
    'UNORDERED_TASKFILE',
    'SINGLE_CMD_TASKFILE',
    'CMD_AND_CMDS_TASKFILE',
    'VERSION_2_TASKFILE',
    'INVALID_YAML_TASKFILE',
    'WRONG_TYPES_TASKFILE',
    'BAD_DEPENDENCY_TASKFILE',
    'BAD_REQUIRED_VAR_TASKFILE',
    'LIST_ROOT_TASKFILE',
]
