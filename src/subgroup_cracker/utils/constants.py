"""Group parameters and attack defaults for Subgroup Cracker."""

# -- Keyed tag --
MAC_MESSAGE: bytes = b"crazy flamboyant for the rap enjoyment"

# -- Attack defaults --
DEFAULT_FACTOR_BOUND: int = 1 << 16
DEFAULT_TWIST_FACTOR_BOUND: int = 1 << 24
DEFAULT_HERD_FACTOR: int = 4
MAX_SIGN_FACTORS: int = 16
PARALLEL_THRESHOLD: int = 1 << 16
CANCEL_POLL_INTERVAL: int = 1024

# -- Finite-field DH groups (Cryptopals set 8) --
# Challenge 57: (p - 1) / q is smooth enough that confinement alone recovers the key.
DH57_P: int = int(
    "7199773997391911030609999317773941274322764333428698921736339643928346453700085358"
    "802973900485592910475480089726140708102474957429903531369589969318716771"
)
DH57_G: int = int(
    "4565356397095740655436854503483826832136106141639563487732438195343690437606117828"
    "318042418238184896212352329118608100083187535033402010599512641674644143"
)
DH57_Q: int = 236234353446506858198510045061214171961

# Challenge 58: confinement leaves a gap the kangaroo has to close.
DH58_P: int = int(
    "1147037487492527565811666350723216140208665025845389627453499167689899926264158151"
    "9101074740642369848233294239851519212341844337347119899874391456329785623"
)
DH58_G: int = int(
    "6229523353339612969781592660847410858898813587384599399782901799360636355667402585"
    "55167783009058567397963466103140082647486611657350811560630587013183357"
)
DH58_Q: int = 335062023296420808191071248367701059461

# -- P-128: y^2 = x^3 - 95051*x + 11279326 --
P128_P: int = 233970423115425145524320034830162017933
P128_A: int = -95051
P128_B: int = 11279326
P128_GX: int = 182
P128_GY: int = 85518893674295321206118380980485522083
P128_Q: int = 29246302889428143187362802287225875743
P128_ORDER: int = 8 * P128_Q

# Invalid curves sharing P-128's field and a-coefficient: (b, group order)
P128_INVALID_CURVES: tuple[tuple[int, int], ...] = (
    (210, 233970423115425145550826547352470124412),
    (504, 233970423115425145544350131142039591210),
    (727, 233970423115425145545378039958152057148),
)

# -- x128: v^2 = u^3 + 534*u^2 + u, birationally equivalent to P-128 via u = x - 178 --
X128_A: int = 534
X128_ORDER: int = P128_ORDER
X128_U: int = 4
X128_V: int = 85518893674295321206118380980485522083
X128_SHIFT: int = 178
