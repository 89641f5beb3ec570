"""Node and weight tables for the Gauss quadrature rules."""

from typing import Optional, Tuple

import torch
from torch import Tensor


def gauss_legendre_nodes_weights(
    n: int,
    dtype: torch.dtype = torch.float64,
    device: Optional[torch.device] = None,
) -> Tuple[Tensor, Tensor]:
    """
    The ``n``-point Gauss-Legendre rule on the reference interval [-1, 1].

    Nodes are the eigenvalues of the Jacobi matrix of the Legendre
    three-term recurrence; each weight is twice the squared first component
    of the matching normalized eigenvector (Golub & Welsch, 1969).

    Parameters
    ----------
    n : int
        Rule size, at least 1.
    dtype : torch.dtype
        Output dtype. The eigenproblem is always solved in float64.
    device : torch.device, optional
        Output device.

    Returns
    -------
    nodes, weights : Tensor
        Both of shape (n,), nodes in increasing order.

    Raises
    ------
    ValueError
        If n < 1.

    Notes
    -----
    Integrates polynomials up to degree 2n - 1 exactly.
    """
    if n < 1:
        raise ValueError(f"n must be at least 1, got {n}")

    if n == 1:
        return (
            torch.zeros(1, dtype=dtype, device=device),
            torch.full((1,), 2.0, dtype=dtype, device=device),
        )

    # zero diagonal, off-diagonal j / sqrt(4j^2 - 1)
    j = torch.arange(1, n, dtype=torch.float64, device=device)
    beta = j / torch.sqrt(4 * j**2 - 1)
    jacobi = torch.diag(beta, diagonal=1) + torch.diag(beta, diagonal=-1)

    lam, vec = torch.linalg.eigh(jacobi)
    w = 2 * vec[0, :] ** 2

    perm = torch.argsort(lam)
    return lam[perm].to(dtype), w[perm].to(dtype)


# QUADPACK Gauss-Kronrod tables (Piessens et al., 1983), non-negative half
# only, starting at the centre node. Gauss weights run from the centre
# outward over the embedded Gauss nodes.

_K15_ABSCISSAE = [
    0.000000000000000000000000000000000,
    0.207784955007898467600689403773245,
    0.405845151377397166906606412076961,
    0.586087235467691130294144838258730,
    0.741531185599394439863864773280788,
    0.864864423359769072789712788640926,
    0.949107912342758524526189684047851,
    0.991455371120812639206854697526329,
]

_K15_WEIGHTS = [
    0.209482141084727828012999174891714,
    0.204432940075298892414161999234649,
    0.190350578064785409913256402421014,
    0.169004726639267902826583426598550,
    0.140653259715525918745189590510238,
    0.104790010322250183839876322541518,
    0.063092092629978553290700663189204,
    0.022935322010529224963732008058970,
]

# G7 nodes: 0, +-0.406, +-0.742, +-0.949
_G7_WEIGHTS = [
    0.417959183673469387755102040816327,
    0.381830050505118944950369775488975,
    0.279705391489276667901467771423780,
    0.129484966168869693270611432679082,
]

_K21_ABSCISSAE = [
    0.000000000000000000000000000000000,
    0.148874338981631210884826001129720,
    0.294392862701460198131126603103866,
    0.433395394129247190799265943165784,
    0.562757134668604683339000099272694,
    0.679409568299024406234327365114874,
    0.780817726586416897063717578345042,
    0.865063366688984510732096688423493,
    0.930157491355708226001207180059508,
    0.973906528517171720077964012084452,
    0.995657163025808080735527280689003,
]

_K21_WEIGHTS = [
    0.149445554002916905664936468389821,
    0.147739104901338491374841515972068,
    0.142775938577060080797094273138717,
    0.134709217311473325928054001771707,
    0.123491976262065851077958109831074,
    0.109387158802297641899210590325805,
    0.093125454583697605535065465083366,
    0.075039674810919952767043140916190,
    0.054755896574351996031381300244580,
    0.032558162307964727478818972459390,
    0.011694638867371874278064396062192,
]

# G10 has no node at 0
_G10_WEIGHTS = [
    0.295524224714752870173892994651338,
    0.269266719309996355091226921569469,
    0.219086362515982043995534934228163,
    0.149451349150580593145776339657697,
    0.066671344308688137593568809893332,
]

_KRONROD_TABLES = {
    15: (_K15_ABSCISSAE, _K15_WEIGHTS, _G7_WEIGHTS),
    21: (_K21_ABSCISSAE, _K21_WEIGHTS, _G10_WEIGHTS),
}


def _mirror(half: Tensor, has_centre: bool) -> Tensor:
    left = half[1:] if has_centre else half
    return torch.cat([left.flip(0), half])


def gauss_kronrod_nodes_weights(
    order: int,
    dtype: torch.dtype = torch.float64,
    device: Optional[torch.device] = None,
) -> Tuple[Tensor, Tensor, Tensor, Tensor]:
    """
    Gauss-Kronrod pair on [-1, 1].

    Parameters
    ----------
    order : int
        Kronrod rule size, 15 (G7-K15) or 21 (G10-K21).
    dtype : torch.dtype
        Output dtype.
    device : torch.device, optional
        Output device.

    Returns
    -------
    nodes : Tensor
        Kronrod abscissae, shape (order,), increasing.
    kronrod_weights : Tensor
        Shape (order,).
    gauss_weights : Tensor
        Weights of the embedded Gauss rule, shape (order // 2,).
    gauss_indices : Tensor
        Where the Gauss abscissae sit in ``nodes``, shape (order // 2,).

    Raises
    ------
    ValueError
        If order is not 15 or 21.
    """
    if order not in _KRONROD_TABLES:
        raise ValueError(f"order must be 15 or 21, got {order}")

    abscissae, k_half, g_half = (
        torch.tensor(table, dtype=dtype, device=device)
        for table in _KRONROD_TABLES[order]
    )

    nodes = torch.cat([-abscissae[1:].flip(0), abscissae])
    k_weights = _mirror(k_half, has_centre=True)
    # G7 includes 0 as a node, G10 does not
    g_weights = _mirror(g_half, has_centre=(order // 2) % 2 == 1)

    # Kronrod points interleave the Gauss points
    g_indices = torch.arange(1, order, 2, device=device)

    return nodes, k_weights, g_weights, g_indices
