'''Dissociation methods reported for MSn scans, and the mapping from the
activation codes used in Thermo filter strings and reaction records.
'''
from ms_rawscan.utils import Constant


class DissociationMethod(Constant):
    '''A named dissociation method.

    Attributes
    ----------
    name: str
        The controlled vocabulary name of the method
    code: str
        The short activation code used by the instrument, e.g. ``"cid"``
    '''

    def __init__(self, name, code=None, is_true=True):
        super(DissociationMethod, self).__init__(name, is_true)
        self.code = code

    def __hash__(self):
        return hash(self.name)

    def __reduce__(self):
        return _lookup_dissociation, (self.name, )


CID = DissociationMethod("collision-induced dissociation", 'cid')
HCD = DissociationMethod("beam-type collision-induced dissociation", 'hcd')
ETD = DissociationMethod("electron transfer dissociation", 'etd')
ECD = DissociationMethod("electron capture dissociation", 'ecd')
UnknownDissociation = DissociationMethod("dissociation method", None, False)


dissociation_methods_map = {
    method.name: method for method in (CID, HCD, ETD, ECD, UnknownDissociation)
}


def _lookup_dissociation(name):
    return dissociation_methods_map[name]


activation_code_map = {
    'cid': CID,
    'hcd': HCD,
    'etd': ETD,
    'ecd': ECD,
}


def dissociation_from_activation(activation_type):
    '''Translate a provider's activation code into a :class:`DissociationMethod`.

    Any code not in :data:`activation_code_map`, including :const:`None`,
    maps to :data:`UnknownDissociation`.

    Parameters
    ----------
    activation_type: str or None

    Returns
    -------
    DissociationMethod
    '''
    if activation_type is None:
        return UnknownDissociation
    return activation_code_map.get(str(activation_type).strip().lower(), UnknownDissociation)
