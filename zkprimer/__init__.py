__version__ = "0.1.0"
__title__ = "zkprimer"
__author__ = "zkprimer contributors"
__email__ = "zkprimer@users.noreply.github.com"
__url__ = "https://github.com/zkprimer/zkprimer"
__license__ = "MIT"
__description__ = "Illustrative zero-knowledge proof toolkit over safe-prime groups: Schnorr, Pedersen, OR- and range proofs."
__copyright__ = "2026, zkprimer contributors"


from zkprimer.params import GroupParameters, generate_parameters, toy_parameters
from zkprimer.primitives.schnorr import KeyPair, SchnorrProof, keygen, prove, verify
from zkprimer.primitives.pedersen import Commitment, commit, open_commitment, combine
from zkprimer.primitives.orproof import ORProof, prove_or, verify_or
from zkprimer.primitives.rangeproof import RangeProof, prove_range, verify_range
from zkprimer.utils.rand import SystemRandomSource, SeededRandomSource
