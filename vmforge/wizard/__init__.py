from .machine import VMCreationWizard, WizardBusyError, WizardStateError, interpret_response
from .state import (
    CatalogedResources, CustomResources, HypervisorChosen, ReviewReady,
    Step, SubmissionOutcome, SubmissionStatus, VMConfiguration,
)
from .transport import ApiTransport, TransportError, TransportResponse

__all__ = [
    'VMCreationWizard', 'WizardBusyError', 'WizardStateError', 'interpret_response',
    'CatalogedResources', 'CustomResources', 'HypervisorChosen', 'ReviewReady',
    'Step', 'SubmissionOutcome', 'SubmissionStatus', 'VMConfiguration',
    'ApiTransport', 'TransportError', 'TransportResponse',
]
