# users/serializers.py

def user_to_dict(user):
    return {
        'id':                     user.id,
        'firebaseUid':            user.firebase_uid,
        'email':                  user.email or None,
        'phoneNumber':            user.phone_number or None,
        'firebaseSignInProvider': user.firebase_sign_in_provider or None,
        'isEmailVerified':        user.is_email_verified,
        'role':                   user.role,
        'isBlocked':              user.is_blocked,
        'isDeleted':              user.is_deleted,
        'fullName':               user.full_name,
        'gender':                 user.gender,
        'dateOfBirth':            user.date_of_birth,
        'profileImage':           user.profile_image,
        'createdAt':              user.created_at,
        'updatedAt':              user.updated_at,
    }


def address_to_dict(address):
    return {
        'id':        address.id,
        'userId':    address.user_id,
        'address':   address.address,
        'zipcode':   address.zipcode,
        'city':      address.city,
        'state':     address.state,
        'label':     address.label,
        'isDefault': address.is_default,
        'createdAt': address.created_at,
        'updatedAt': address.updated_at,
    }
