"""
Mappers para conversão entre Entities (Core) e Models (Django).

Responsabilidades:
- Converter Custodiado ↔ CustodiadoModel
- Converter HistoricoEndereco ↔ HistoricoEnderecoModel

Princípios:
- Mappers são stateless
- Não contêm lógica de negócio
- Enums são gravados pelo ``.value``
"""

from typing import Any, Dict

from src.core.custodiados.entities import (
    Custodiado,
    HistoricoEndereco,
    SituacaoCustodiado,
    StatusComparecimento,
)

from .models import CustodiadoModel, HistoricoEnderecoModel


class CustodiadoMapper:
    """
    Mapper para conversão entre Custodiado e CustodiadoModel.

    - to_model_data(): Entity → campos do Model
    - to_entity(): Model → Entity
    """

    @staticmethod
    def to_model_data(entity: Custodiado) -> Dict[str, Any]:
        """
        Campos para ``update_or_create``.

        Note:
            Não inclui ``id`` - usado como chave de busca pelo Repository
        """
        return {
            'nome': entity.nome,
            'cpf': entity.cpf,
            'rg': entity.rg,
            'contato': entity.contato,
            'processo': entity.processo,
            'vara': entity.vara,
            'comarca': entity.comarca,
            'data_decisao': entity.data_decisao,
            'periodicidade': entity.periodicidade,
            'data_comparecimento_inicial': entity.data_comparecimento_inicial,
            'status': entity.status.value,
            'situacao': entity.situacao.value,
            'ultimo_comparecimento': entity.ultimo_comparecimento,
            'proximo_comparecimento': entity.proximo_comparecimento,
            'observacoes': entity.observacoes,
            'criado_em': entity.criado_em,
            'atualizado_em': entity.atualizado_em,
        }

    @staticmethod
    def to_entity(model: CustodiadoModel) -> Custodiado:
        """
        Converte CustodiadoModel para Custodiado.

        Não passa pelo ``criar()``: registros persistidos já foram
        validados e podem conter datas que hoje seriam recusadas.
        """
        return Custodiado(
            id=model.id,
            nome=model.nome,
            cpf=model.cpf,
            rg=model.rg,
            contato=model.contato,
            processo=model.processo,
            vara=model.vara,
            comarca=model.comarca,
            data_decisao=model.data_decisao,
            periodicidade=model.periodicidade,
            data_comparecimento_inicial=model.data_comparecimento_inicial,
            status=StatusComparecimento(model.status),
            situacao=SituacaoCustodiado(model.situacao),
            ultimo_comparecimento=model.ultimo_comparecimento,
            proximo_comparecimento=model.proximo_comparecimento,
            observacoes=model.observacoes,
            criado_em=model.criado_em,
            atualizado_em=model.atualizado_em,
        )


class HistoricoEnderecoMapper:
    """Mapper para HistoricoEndereco."""

    @staticmethod
    def to_model_data(entity: HistoricoEndereco) -> Dict[str, Any]:
        return {
            'custodiado_id': entity.custodiado_id,
            'cep': entity.cep,
            'logradouro': entity.logradouro,
            'numero': entity.numero,
            'complemento': entity.complemento,
            'bairro': entity.bairro,
            'cidade': entity.cidade,
            'estado': entity.estado,
            'data_inicio': entity.data_inicio,
            'data_fim': entity.data_fim,
            'ativo': entity.ativo,
            'motivo_alteracao': entity.motivo_alteracao,
            'validado_por': entity.validado_por,
            'historico_comparecimento_id': entity.historico_comparecimento_id,
            'criado_em': entity.criado_em,
            'atualizado_em': entity.atualizado_em,
        }

    @staticmethod
    def to_entity(model: HistoricoEnderecoModel) -> HistoricoEndereco:
        return HistoricoEndereco(
            id=model.id,
            custodiado_id=model.custodiado_id,
            cep=model.cep,
            logradouro=model.logradouro,
            numero=model.numero,
            complemento=model.complemento,
            bairro=model.bairro,
            cidade=model.cidade,
            estado=model.estado,
            data_inicio=model.data_inicio,
            data_fim=model.data_fim,
            ativo=model.ativo,
            motivo_alteracao=model.motivo_alteracao,
            validado_por=model.validado_por,
            historico_comparecimento_id=model.historico_comparecimento_id,
            criado_em=model.criado_em,
            atualizado_em=model.atualizado_em,
        )
